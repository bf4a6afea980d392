"""`pairsh setup` command implementation."""

import argparse
import sys

from pairsh.cli.shared import configure_logging
from pairsh.config import load_config
from pairsh.errors import BootstrapError
from pairsh.models import EnvironmentDescriptor
from pairsh.venv import bootstrap


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pairsh setup",
        description="Create the virtual environment and install the tool into it",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--venv", help="Virtual environment path (default from config)")
    return parser


def run(argv: list[str]) -> int:
    """Execute the setup command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    config = load_config()
    if args.venv:
        config = config.model_copy(update={"venv_path": args.venv})
    env = EnvironmentDescriptor.from_path(config.venv_path)

    try:
        created = bootstrap(config)
    except BootstrapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if created:
        print(f"Installed {config.package} into {env.path}")
    else:
        print(f"Environment already present at {env.path}")
    return 0
