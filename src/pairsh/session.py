"""Supervision of the single pair-programming child process.

The child is started lazily on the first command, fed slash-commands on its
stdin, and its merged stdout/stderr is appended verbatim to the display
buffer. Output is pulled by the host loop via ``poll_output`` so every
append happens on the host's own thread, in arrival order.
"""

import logging
import os
import select
import signal
import subprocess
from collections.abc import Callable
from enum import Enum

from pairsh.buffers import Buffer, BufferRegistry
from pairsh.errors import SpawnError
from pairsh.models import EnvironmentDescriptor, LaunchConfig, PairshConfig
from pairsh.venv import activate, bootstrap, resolve_program

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096
STOP_GRACE_SECONDS = 5
EXIT_GRACE_SECONDS = 0.2

Notify = Callable[[str], None]


class SessionState(str, Enum):
    ABSENT = "absent"
    STARTING = "starting"
    RUNNING = "running"


class OutputSink:
    """Append every chunk from the child to the end of the display buffer."""

    def __init__(self, buffer: Buffer) -> None:
        self.buffer = buffer

    def __call__(self, chunk: bytes) -> None:
        self.buffer.append(chunk)


def describe_exit(name: str, returncode: int) -> str:
    """Return a human-readable notice for a child exit status."""
    if returncode == 0:
        return f"Process {name} finished"
    if returncode < 0:
        try:
            signame = signal.Signals(-returncode).name
        except ValueError:
            signame = str(-returncode)
        return f"Process {name} killed by signal {signame}"
    return f"Process {name} exited abnormally with code {returncode}"


class LifecycleObserver:
    """Report child state changes to the status log. Never restarts anything."""

    def __init__(self, name: str, notify: Notify | None = None) -> None:
        self.name = name
        self._notify = notify

    def started(self, pid: int) -> None:
        self._emit(f"Process {self.name} started (pid {pid})")

    def exited(self, returncode: int) -> None:
        self._emit(describe_exit(self.name, returncode))

    def _emit(self, message: str) -> None:
        log.info(message)
        if self._notify is not None:
            self._notify(message)


def build_launch_config(
    config: PairshConfig,
    extra_args: list[str] | None = None,
    environ: dict[str, str] | None = None,
) -> LaunchConfig:
    """Build the child's argv and explicit environment from config."""
    env = dict(os.environ if environ is None else environ)
    if config.use_venv:
        activate(EnvironmentDescriptor.from_path(config.venv_path), env)
    executable = resolve_program(config.program, env)
    if executable is None:
        where = f" in {config.venv_path}" if config.use_venv else " on PATH"
        raise SpawnError(f"{config.program} not found{where}")
    argv = [executable, *config.args, *(extra_args or [])]
    return LaunchConfig(argv=argv, env=env, cwd=os.getcwd())


class Session:
    """At most one live child process, plus the buffers it talks through."""

    def __init__(
        self,
        config: PairshConfig,
        buffers: BufferRegistry,
        notify: Notify | None = None,
        extra_args: list[str] | None = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        bootstrapper: Callable[[PairshConfig], bool] = bootstrap,
    ) -> None:
        self.config = config
        self.output_buffer = config.output_buffer
        self.input_buffer = config.input_buffer
        self.extra_args = list(extra_args or [])
        self.process: subprocess.Popen | None = None
        self.state = SessionState.ABSENT
        self._sink = OutputSink(buffers.get(config.output_buffer))
        self._input_log = buffers.get(config.input_buffer)
        self._observer = LifecycleObserver(config.program, notify)
        self._popen = popen
        self._bootstrapper = bootstrapper
        self._output_open = False

    @property
    def args(self) -> list[str]:
        return [*self.config.args, *self.extra_args]

    def is_alive(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def fileno(self) -> int | None:
        if self.process is None or self.process.stdout is None or not self._output_open:
            return None
        return self.process.stdout.fileno()

    def ensure_running(self) -> None:
        """Start the child unless one is already alive."""
        if self.is_alive():
            return
        if self.process is not None:
            # Exited but not reaped yet: flush what it left behind first.
            self._finish()

        self.state = SessionState.STARTING
        try:
            if self.config.use_venv:
                self._bootstrapper(self.config)
            launch = build_launch_config(self.config, self.extra_args)
            log.debug("spawning %s", launch.argv)
            process = self._popen(
                launch.argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=launch.env,
                cwd=launch.cwd,
                bufsize=0,
            )
        except OSError as e:
            self.state = SessionState.ABSENT
            raise SpawnError(f"could not start {self.config.program}: {e}") from e
        except BaseException:
            self.state = SessionState.ABSENT
            raise

        self.process = process
        self._output_open = True
        self.state = SessionState.RUNNING
        self._observer.started(process.pid)

    def send(self, text: str) -> bool:
        """Write one line to the child, starting it first if needed.

        Returns False when the pipe is already gone; the line is dropped.
        """
        self.ensure_running()
        data = (text + "\n").encode()
        self._input_log.append(data)
        stdin = self.process.stdin if self.process is not None else None
        if stdin is None:
            log.warning("no input stream for %s, dropped %r", self.config.program, text)
            return False
        try:
            stdin.write(data)
            stdin.flush()
        except (OSError, ValueError) as e:
            log.warning("could not write to %s: %s", self.config.program, e)
            return False
        log.debug("sent %r", text)
        return True

    def poll_output(self, timeout: float | None = 0.0) -> bool:
        """Move at most one chunk of child output into the display buffer.

        Returns True when a chunk was delivered. Once output ends and the
        child has exited, it is reaped and the session goes back to ABSENT.
        """
        fd = self.fileno()
        if fd is None:
            if self.process is not None and self.process.poll() is not None:
                self._finish()
            return False
        try:
            ready, _, _ = select.select([fd], [], [], timeout)
        except (OSError, ValueError):
            ready = [fd]
        if not ready:
            return False
        chunk = self._read_chunk(fd)
        if chunk:
            self._sink(chunk)
            return True
        self._end_of_output()
        return False

    def stop(self) -> None:
        """Terminate a live child and reap it."""
        process = self.process
        if process is None:
            return
        if process.poll() is None:
            log.debug("terminating %s (pid %s)", self.config.program, process.pid)
            if process.stdin is not None:
                try:
                    process.stdin.close()
                except OSError:
                    pass
            process.terminate()
            try:
                process.wait(timeout=STOP_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                process.kill()
        self._finish()

    def _end_of_output(self) -> None:
        process = self.process
        self._output_open = False
        try:
            process.stdout.close()
        except OSError:
            pass
        try:
            process.wait(timeout=EXIT_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            # Closed its output but keeps running: reaped by the next start or stop.
            log.debug("%s closed its output but is still running", self.config.program)
            return
        self._finish()

    def _read_chunk(self, fd: int) -> bytes:
        try:
            return os.read(fd, READ_CHUNK_SIZE)
        except OSError:
            return b""

    def _drain(self) -> None:
        fd = self.fileno()
        if fd is None:
            return
        while True:
            try:
                ready, _, _ = select.select([fd], [], [], 0)
            except (OSError, ValueError):
                return
            if not ready:
                return
            chunk = self._read_chunk(fd)
            if not chunk:
                return
            self._sink(chunk)

    def _finish(self) -> None:
        process = self.process
        if process is None:
            return
        self._drain()
        returncode = process.wait()
        for stream in (process.stdin, process.stdout):
            if stream is None:
                continue
            try:
                stream.close()
            except OSError:
                pass
        self.process = None
        self._output_open = False
        self.state = SessionState.ABSENT
        self._observer.exited(returncode)
