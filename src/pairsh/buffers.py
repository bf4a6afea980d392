"""Named append-only buffers that stand in for editor buffers."""

from collections.abc import Callable

Mirror = Callable[[bytes], None]


class Buffer:
    """An append-only byte buffer, optionally mirrored to other sinks."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._data = bytearray()
        self._mirrors: list[Mirror] = []

    def add_mirror(self, mirror: Mirror) -> None:
        self._mirrors.append(mirror)

    def append(self, chunk: bytes) -> None:
        self._data.extend(chunk)
        for mirror in self._mirrors:
            mirror(chunk)

    def contents(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)


class BufferRegistry:
    """Resolve buffers by name, creating them on first use."""

    def __init__(self) -> None:
        self._buffers: dict[str, Buffer] = {}

    def get(self, name: str) -> Buffer:
        buffer = self._buffers.get(name)
        if buffer is None:
            buffer = Buffer(name)
            self._buffers[name] = buffer
        return buffer

    def __contains__(self, name: object) -> bool:
        return name in self._buffers

    def names(self) -> list[str]:
        return list(self._buffers)
