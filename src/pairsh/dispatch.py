"""Fixed table of named actions and their slash-commands."""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from pairsh.errors import SpawnError
from pairsh.keymap import Keymap
from pairsh.session import Notify, Session

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    """A named action bound to a key under the prefix."""

    name: str
    command: str
    key: str
    help: str
    prompt: str | None = None
    expand_path: bool = False

    def render(self, answer: str | None = None) -> str:
        if self.prompt is None:
            return self.command
        return f"{self.command} {answer}"


ACTIONS: tuple[Action, ...] = (
    Action("add", "/add", "a", "Add a file to the chat", prompt="Add file: ", expand_path=True),
    Action("code", "/code", "c", "Ask for a code change", prompt="Code: "),
    Action("diff", "/diff", "d", "Show the diff since the last message"),
    Action("exit", "/exit", "x", "Exit the tool"),
    Action("git", "/git", "g", "Run git"),
    Action("help", "/help", "h", "Show the tool's help"),
    Action("lint", "/lint", "l", "Lint and fix files in the chat"),
    Action("map", "/map", "m", "Print the repository map"),
    Action("run", "/run", "r", "Run a shell command"),
    Action("settings", "/settings", "s", "Print the current settings"),
    Action("test", "/test", "t", "Run the test command"),
    Action("undo", "/undo", "u", "Undo the last commit"),
)

ACTIONS_BY_NAME = {action.name: action for action in ACTIONS}


def expand_path(raw: str) -> str:
    return os.path.abspath(os.path.expanduser(os.path.expandvars(raw.strip())))


@dataclass(frozen=True)
class NeedsInput:
    """The action is waiting for the user to answer ``prompt``."""

    action: Action

    @property
    def prompt(self) -> str:
        return self.action.prompt or ""


@dataclass(frozen=True)
class Dispatched:
    """What happened to an action: the line sent, and whether it arrived."""

    action: Action
    text: str | None
    delivered: bool


class Dispatcher:
    """Turn action names into slash-command lines written to the session."""

    def __init__(
        self,
        session: Session,
        notify: Notify | None = None,
        actions: tuple[Action, ...] = ACTIONS,
    ) -> None:
        self.session = session
        self._notify = notify
        self._actions = {action.name: action for action in actions}

    @property
    def actions(self) -> list[Action]:
        return list(self._actions.values())

    def action(self, name: str) -> Action:
        try:
            return self._actions[name]
        except KeyError:
            raise KeyError(f"unknown action: {name}") from None

    def request(self, name: str) -> NeedsInput | Dispatched:
        action = self.action(name)
        if action.prompt is not None:
            return NeedsInput(action)
        return self._send(action, action.render())

    def resume(self, intent: NeedsInput, answer: str | None) -> Dispatched:
        action = intent.action
        if answer is None or not answer.strip():
            log.debug("%s cancelled", action.name)
            return Dispatched(action, None, False)
        value = expand_path(answer) if action.expand_path else answer.strip()
        return self._send(action, action.render(value))

    def run(self, name: str, ask: Callable[[str], str | None]) -> Dispatched:
        """Dispatch synchronously, calling ``ask`` when the action needs input."""
        result = self.request(name)
        if isinstance(result, NeedsInput):
            return self.resume(result, ask(result.prompt))
        return result

    def _send(self, action: Action, text: str) -> Dispatched:
        try:
            delivered = self.session.send(text)
        except SpawnError as e:
            log.debug("%s: %s", action.name, e)
            if self._notify is not None:
                self._notify(f"Error: {e}")
            return Dispatched(action, text, False)
        return Dispatched(action, text, delivered)


def build_keymap(prefix: str, actions: list[Action] | tuple[Action, ...] = ACTIONS) -> Keymap:
    """Bind every action, plus the host's quit and help keys, under ``prefix``."""
    keymap = Keymap()
    for action in actions:
        keymap.bind(f"{prefix} {action.key}", action.name)
    keymap.bind(f"{prefix} q", "quit")
    keymap.bind(f"{prefix} ?", "describe-bindings")
    return keymap
