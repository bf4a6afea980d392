"""`pairsh keys` command implementation."""

import argparse
import sys

from pairsh.cli.shared import format_chord
from pairsh.config import load_config
from pairsh.dispatch import ACTIONS


def run(argv: list[str]) -> int:
    """Print the key chord for every action."""
    parser = argparse.ArgumentParser(prog="pairsh keys", description="List key bindings")
    parser.add_argument("--prefix", help="Key prefix to show (default from config)")
    args = parser.parse_args(argv)

    prefix = args.prefix or load_config().key_prefix
    rows = [(f"{prefix} {action.key}", action.command, action.help) for action in ACTIONS]
    rows.append((f"{prefix} ?", "", "List bindings"))
    rows.append((f"{prefix} q", "", "Quit"))
    width = max(len(chord) for chord, _, _ in rows)
    for chord, command, help_text in rows:
        padding = " " * (width - len(chord))
        sys.stdout.write(f"  {format_chord(chord)}{padding}  {command:<10} {help_text}\n")
    return 0
