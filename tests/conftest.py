"""Shared fixtures: a fake child process backed by a real pipe."""

import os
import signal
import subprocess
from unittest.mock import patch

import pytest

from pairsh.buffers import BufferRegistry
from pairsh.models import PairshConfig


class FakeStdin:
    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self.closed = False
        self.broken = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed file")
        if self.broken:
            raise BrokenPipeError(32, "Broken pipe")
        self.writes.append(data)
        return len(data)

    def flush(self) -> None:
        if self.broken:
            raise BrokenPipeError(32, "Broken pipe")

    def close(self) -> None:
        self.closed = True


class FakeProcess:
    """Quacks like subprocess.Popen; output is written into a real pipe."""

    _next_pid = 4000

    def __init__(self, argv, **kwargs) -> None:
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.argv = argv
        self.kwargs = kwargs
        self.returncode: int | None = None
        self.stdin = FakeStdin()
        read_fd, self._write_fd = os.pipe()
        self._output_closed = False
        self.stdout = os.fdopen(read_fd, "rb", buffering=0)

    def emit(self, data: bytes) -> None:
        os.write(self._write_fd, data)

    def close_output(self) -> None:
        if not self._output_closed:
            self._output_closed = True
            os.close(self._write_fd)

    def exit(self, code: int = 0) -> None:
        if self.returncode is None:
            self.returncode = code
        self.close_output()

    def poll(self) -> int | None:
        return self.returncode

    def wait(self, timeout: float | None = None) -> int:
        if self.returncode is None:
            if timeout is not None:
                raise subprocess.TimeoutExpired(self.argv, timeout)
            raise AssertionError("wait() on a live fake would block forever")
        return self.returncode

    def terminate(self) -> None:
        self.exit(-signal.SIGTERM)

    def kill(self) -> None:
        self.exit(-signal.SIGKILL)


class FakePopen:
    """Records every spawn."""

    def __init__(self) -> None:
        self.processes: list[FakeProcess] = []

    def __call__(self, argv, **kwargs) -> FakeProcess:
        process = FakeProcess(argv, **kwargs)
        self.processes.append(process)
        return process

    @property
    def last(self) -> FakeProcess:
        return self.processes[-1]


@pytest.fixture
def fake_popen():
    popen = FakePopen()
    yield popen
    for process in popen.processes:
        process.exit()
        process.stdout.close()


@pytest.fixture
def config() -> PairshConfig:
    return PairshConfig(use_venv=False, program="aider", args=["--no-pretty"])


@pytest.fixture
def buffers() -> BufferRegistry:
    return BufferRegistry()


@pytest.fixture
def resolved_program():
    with patch("pairsh.session.resolve_program", return_value="/opt/bin/aider") as mock_resolve:
        yield mock_resolve
