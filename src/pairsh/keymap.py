"""Emacs-style key chords ("C-c d") and a decoder for raw terminal bytes."""

from dataclasses import dataclass

NAMED_KEYS = {
    "RET": b"\r",
    "TAB": b"\t",
    "ESC": b"\x1b",
    "SPC": b" ",
    "DEL": b"\x7f",
}


def parse_key(token: str) -> bytes:
    """Translate one key token (``C-c``, ``M-x``, ``a``, ``RET``) to bytes."""
    if token in NAMED_KEYS:
        return NAMED_KEYS[token]
    if token.startswith("M-") and len(token) > 2:
        return b"\x1b" + parse_key(token[2:])
    if token.startswith("C-") and len(token) == 3:
        char = token[2]
        if char == "?":
            return b"\x7f"
        code = ord(char.upper())
        if not 0x40 <= code <= 0x5F:
            raise ValueError(f"unsupported control key: {token}")
        return bytes([code & 0x1F])
    if len(token) == 1:
        return token.encode()
    raise ValueError(f"unrecognized key: {token!r}")


def parse_chord(chord: str) -> bytes:
    """Translate a space-separated chord (``C-c a``) to the bytes a terminal sends."""
    tokens = chord.split()
    if not tokens:
        raise ValueError("empty key chord")
    return b"".join(parse_key(token) for token in tokens)


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key sequence: a bound name, or None for unbound input."""

    name: str | None
    keys: bytes


class Keymap:
    """Mapping of chords to names, keeping the chord text for display."""

    def __init__(self) -> None:
        self._by_keys: dict[bytes, str] = {}
        self._chords: list[tuple[str, str]] = []

    def bind(self, chord: str, name: str) -> None:
        keys = parse_chord(chord)
        for bound in self._by_keys:
            if bound.startswith(keys) or keys.startswith(bound):
                raise ValueError(f"{chord} conflicts with an existing binding")
        self._by_keys[keys] = name
        self._chords.append((chord, name))

    def lookup(self, keys: bytes) -> str | None:
        return self._by_keys.get(keys)

    def is_prefix(self, keys: bytes) -> bool:
        return any(bound.startswith(keys) and bound != keys for bound in self._by_keys)

    def bindings(self) -> list[tuple[str, str]]:
        return list(self._chords)


class KeySequenceDecoder:
    """Accumulate raw input bytes and emit events for complete chords."""

    def __init__(self, keymap: Keymap) -> None:
        self._keymap = keymap
        self._pending = b""

    @property
    def pending(self) -> bytes:
        return self._pending

    def reset(self) -> None:
        self._pending = b""

    def feed(self, data: bytes) -> list[KeyEvent]:
        events: list[KeyEvent] = []
        for value in data:
            keys = self._pending + bytes([value])
            name = self._keymap.lookup(keys)
            if name is not None:
                events.append(KeyEvent(name, keys))
                self._pending = b""
            elif self._keymap.is_prefix(keys):
                self._pending = keys
            else:
                events.append(KeyEvent(None, keys))
                self._pending = b""
        return events
