"""Shared CLI helpers."""

import logging
import os
import sys

from pairsh.constants import BOLD, CYAN, RESET

LOG_FORMAT = "%(name)s %(levelname)s: %(message)s"


def configure_logging(debug: bool, log_file: str | None = None, quiet: bool = False) -> None:
    """Configure the root logger; ``log_file`` keeps records off the terminal.

    ``quiet`` drops records that have no file to go to. A raw-mode terminal
    would print them without carriage returns.
    """
    level = logging.DEBUG if debug else logging.WARNING
    if log_file:
        logging.basicConfig(
            level=level,
            format="%(asctime)s " + LOG_FORMAT,
            filename=os.path.expanduser(log_file),
        )
        # Lifecycle notices are worth keeping in a file even without --debug.
        if not debug:
            logging.getLogger("pairsh").setLevel(logging.INFO)
        return
    if quiet:
        logging.basicConfig(level=level, handlers=[logging.NullHandler()])
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)


def supports_color() -> bool:
    """Return whether ANSI color output should be used."""
    if os.getenv("NO_COLOR") is not None:
        return False
    if os.getenv("TERM", "").lower() == "dumb":
        return False
    return sys.stdout.isatty()


def format_chord(chord: str) -> str:
    if supports_color():
        return f"{BOLD}{CYAN}{chord}{RESET}"
    return chord
