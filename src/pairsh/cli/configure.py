"""`pairsh configure` command implementation."""

import argparse
import sys

from pydantic import ValidationError

from pairsh.cli.shared import configure_logging
from pairsh.config import CONFIG_FILE, load_config, save_config
from pairsh.keymap import parse_key
from pairsh.models import DEFAULT_ARGS, PairshConfig


def build_parser() -> argparse.ArgumentParser:
    """Build parser for the configure command."""
    parser = argparse.ArgumentParser(
        prog="pairsh configure",
        description="Configure the tool, its environment and key bindings",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--program", help="Tool executable name or path")
    parser.add_argument("--package", help="Package to install into the virtual environment")
    parser.add_argument("--venv", dest="venv_path", help="Virtual environment path")
    parser.add_argument(
        "--arg",
        dest="tool_args",
        action="append",
        metavar="ARG",
        help="Argument passed to the tool (repeat for several; replaces the stored list)",
    )
    parser.add_argument(
        "--reset-args",
        action="store_true",
        help=f"Restore the default tool arguments ({' '.join(DEFAULT_ARGS)})",
    )
    parser.add_argument("--key-prefix", help="Key prefix for all bindings (example: C-c)")
    parser.add_argument("--log-file", help="Status log file for interactive mode")
    parser.add_argument(
        "--clear-log-file",
        action="store_true",
        help="Stop writing a status log file",
    )
    venv_group = parser.add_mutually_exclusive_group()
    venv_group.add_argument(
        "--use-venv",
        action="store_true",
        help="Bootstrap and run the tool from the virtual environment (default)",
    )
    venv_group.add_argument(
        "--no-venv",
        action="store_true",
        help="Run the tool from PATH",
    )
    return parser


def run(argv: list[str]) -> int:
    """Execute the configure command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    if args.tool_args is not None and args.reset_args:
        print("Error: --arg and --reset-args cannot be used together", file=sys.stderr)
        return 2
    if args.log_file is not None and args.clear_log_file:
        print("Error: --log-file and --clear-log-file cannot be used together", file=sys.stderr)
        return 2
    if args.key_prefix is not None:
        try:
            for token in args.key_prefix.split():
                parse_key(token)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    updates: dict = {}
    for field in ("program", "package", "venv_path", "key_prefix", "log_file"):
        value = getattr(args, field)
        if value is not None:
            updates[field] = value
    if args.tool_args is not None:
        updates["args"] = args.tool_args
    if args.reset_args:
        updates["args"] = list(DEFAULT_ARGS)
    if args.clear_log_file:
        updates["log_file"] = None
    if args.use_venv:
        updates["use_venv"] = True
    if args.no_venv:
        updates["use_venv"] = False

    existing = load_config(apply_env=False)
    try:
        updated = PairshConfig.model_validate({**existing.model_dump(), **updates})
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        path = save_config(updated)
    except OSError as e:
        print(f"Error: could not write {CONFIG_FILE}: {e}", file=sys.stderr)
        return 1

    print(f"\nConfiguration saved to {path}")
    print(f"  program: {updated.program}")
    print(f"  args: {' '.join(updated.args) or '(none)'}")
    print(f"  package: {updated.package}")
    print(f"  venv_path: {updated.venv_path}")
    print("  use_venv: " + ("true" if updated.use_venv else "false"))
    print(f"  key_prefix: {updated.key_prefix}")
    print(f"  log_file: {updated.log_file or 'not set'}")
    print("")
    return 0
