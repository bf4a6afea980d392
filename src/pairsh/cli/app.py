"""Top-level CLI router."""

import sys

from . import bootstrap as bootstrap_cmd
from . import configure as configure_cmd
from . import keys as keys_cmd
from . import run as run_cmd

SUBCOMMANDS = {
    "setup": bootstrap_cmd.run,
    "configure": configure_cmd.run,
    "keys": keys_cmd.run,
}


def main(argv: list[str] | None = None) -> int:
    """Route to a subcommand, or to the interactive session by default."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in SUBCOMMANDS:
        return SUBCOMMANDS[args[0]](args[1:])
    return run_cmd.run(args)


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(main())
