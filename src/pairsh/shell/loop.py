"""Raw-mode terminal loop: key chords in, child output out."""

import logging
import os
import select
import sys
import termios
import tty

from pairsh.buffers import BufferRegistry
from pairsh.constants import DIM, RESET
from pairsh.dispatch import Dispatcher, build_keymap
from pairsh.keymap import Keymap, KeySequenceDecoder
from pairsh.models import PairshConfig
from pairsh.session import Session

log = logging.getLogger(__name__)

STDIN_READ_SIZE = 1024


def _terminal_writer(fd: int):
    """Return a mirror that writes to a raw-mode terminal.

    Raw mode turns off output post-processing, so bare newlines are expanded
    to CRLF here. The buffer itself keeps the bytes unchanged.
    """

    def write(chunk: bytes) -> None:
        data = chunk.replace(b"\r\n", b"\n").replace(b"\n", b"\r\n")
        try:
            os.write(fd, data)
        except OSError:
            pass

    return write


def describe_bindings(keymap: Keymap, dispatcher: Dispatcher) -> str:
    """Return a table of chords, action names and help lines."""
    helps = {action.name: action.help for action in dispatcher.actions}
    helps["quit"] = "Stop the tool and leave pairsh"
    helps["describe-bindings"] = "List these bindings"
    bindings = keymap.bindings()
    width = max(len(chord) for chord, _ in bindings)
    lines = [
        f"  {chord.ljust(width)}  {name:<18} {helps.get(name, '')}".rstrip()
        for chord, name in bindings
    ]
    return "\n".join(lines) + "\n"


def session_loop(config: PairshConfig, extra_args: list[str] | None = None) -> int:
    """Run the interactive loop until the quit chord or end of input."""
    if not sys.stdin.isatty():
        print("Error: stdin must be a terminal", file=sys.stderr)
        return 1
    if os.name != "posix":
        print("Error: interactive mode requires a POSIX terminal", file=sys.stderr)
        return 1

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    display = _terminal_writer(stdout_fd)

    def notify(message: str) -> None:
        display(f"\n{DIM}[{message}]{RESET}\n".encode())

    buffers = BufferRegistry()
    buffers.get(config.output_buffer).add_mirror(display)
    session = Session(config, buffers, notify=notify, extra_args=extra_args)
    dispatcher = Dispatcher(session, notify=notify)
    try:
        keymap = build_keymap(config.key_prefix, dispatcher.actions)
    except ValueError as e:
        print(f"Error: invalid key prefix {config.key_prefix!r}: {e}", file=sys.stderr)
        return 1
    decoder = KeySequenceDecoder(keymap)

    old_attrs = termios.tcgetattr(stdin_fd)

    def ask(prompt: str) -> str | None:
        # Prompts block like a minibuffer read, in cooked mode.
        termios.tcsetattr(stdin_fd, termios.TCSADRAIN, old_attrs)
        try:
            os.write(stdout_fd, b"\n")
            return input(prompt)
        except (EOFError, KeyboardInterrupt):
            return None
        finally:
            tty.setraw(stdin_fd)

    notify(f"pairsh: {config.key_prefix} ? lists bindings, {config.key_prefix} q quits")
    tty.setraw(stdin_fd)

    try:
        while True:
            output_fd = session.fileno()
            if output_fd is None:
                # Reaps a child that closed its output earlier and has since exited.
                session.poll_output(0)
            fds = [stdin_fd] if output_fd is None else [stdin_fd, output_fd]
            try:
                rfds, _, _ = select.select(fds, [], [])
            except (OSError, ValueError):
                break

            # Child -> display buffer
            if output_fd is not None and output_fd in rfds:
                session.poll_output(0)

            # Keystrokes -> actions
            if stdin_fd not in rfds:
                continue
            try:
                data = os.read(stdin_fd, STDIN_READ_SIZE)
            except OSError:
                break
            if not data:
                break

            quit_requested = False
            for event in decoder.feed(data):
                if event.name is None:
                    os.write(stdout_fd, b"\a")
                elif event.name == "quit":
                    quit_requested = True
                    break
                elif event.name == "describe-bindings":
                    display(b"\n" + describe_bindings(keymap, dispatcher).encode())
                else:
                    result = dispatcher.run(event.name, ask)
                    if result.text is not None and not result.delivered:
                        notify(f"{result.text} was not delivered")
            if quit_requested:
                break
    finally:
        termios.tcsetattr(stdin_fd, termios.TCSAFLUSH, old_attrs)
        session.stop()

    return 0
