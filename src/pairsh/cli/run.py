"""Interactive session command."""

import argparse

from pairsh import __version__
from pairsh.cli.shared import configure_logging
from pairsh.config import load_config
from pairsh.shell import session_loop


def build_parser() -> argparse.ArgumentParser:
    """Build parser for interactive mode."""
    parser = argparse.ArgumentParser(
        prog="pairsh",
        description="Drive an AI pair-programming CLI with key chords",
        epilog=(
            "Subcommands: setup, configure, keys. "
            "Arguments after `--` are passed to the tool unchanged."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Write the status log to this file")
    parser.add_argument("--program", help="Tool executable to run (default from config)")
    parser.add_argument("--venv", help="Virtual environment path (default from config)")
    parser.add_argument(
        "--no-venv",
        action="store_true",
        help="Run the tool from PATH without bootstrapping a virtual environment",
    )
    return parser


def split_tool_args(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split ``argv`` at the first ``--`` into (own args, tool args)."""
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1 :]
    return argv, []


def run(argv: list[str]) -> int:
    """Execute interactive mode."""
    own_args, tool_args = split_tool_args(argv)
    parser = build_parser()
    args = parser.parse_args(own_args)

    config = load_config()
    updates: dict = {}
    if args.program:
        updates["program"] = args.program
    if args.venv:
        updates["venv_path"] = args.venv
    if args.no_venv:
        updates["use_venv"] = False
    if args.log_file:
        updates["log_file"] = args.log_file
    if updates:
        config = config.model_copy(update=updates)

    configure_logging(args.debug, config.log_file, quiet=True)
    return session_loop(config, extra_args=tool_args)
