"""Terminal host that forwards key chords to the pair-programming tool."""

from pairsh.shell.loop import describe_bindings, session_loop

__all__ = [
    "describe_bindings",
    "session_loop",
]
