"""Isolated virtual environment bootstrap for the pair-programming tool."""

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Callable, MutableMapping

from pairsh.errors import BootstrapError
from pairsh.models import EnvironmentDescriptor, PairshConfig
from pairsh.wait_indicator import WaitIndicator

log = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


def _run_step(runner: Runner, argv: list[str], what: str) -> None:
    log.debug("running %s", argv)
    try:
        result = runner(argv, capture_output=True, text=True, check=False)
    except OSError as e:
        raise BootstrapError(f"could not {what}: {e}") from e
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip().splitlines()
        tail = detail[-1] if detail else f"exit code {result.returncode}"
        raise BootstrapError(f"could not {what}: {tail}")


def create_environment(env: EnvironmentDescriptor, runner: Runner = subprocess.run) -> None:
    """Create a virtual environment at the descriptor's path."""
    _run_step(
        runner,
        [sys.executable, "-m", "venv", str(env.path)],
        f"create virtual environment at {env.path}",
    )


def install_package(
    env: EnvironmentDescriptor, package: str, runner: Runner = subprocess.run
) -> None:
    """Install a package into the environment with its own pip."""
    _run_step(
        runner,
        [str(env.python), "-m", "pip", "install", package],
        f"install {package} into {env.path}",
    )


def ensure_environment(
    env: EnvironmentDescriptor,
    package: str,
    runner: Runner = subprocess.run,
    indicator: WaitIndicator | None = None,
) -> bool:
    """Create the environment and install ``package`` unless it already exists.

    Returns True when the environment was created by this call. An existing
    environment is left untouched: no version check and no upgrade. A failed
    step raises BootstrapError and leaves whatever was written on disk.
    """
    if env.exists:
        log.debug("environment %s already present", env.path)
        return False

    log.info("bootstrapping %s into %s", package, env.path)
    if indicator is not None:
        indicator.start()
    try:
        if indicator is not None:
            indicator.update(f"Creating environment at {env.path}")
        create_environment(env, runner)
        if indicator is not None:
            indicator.update(f"Installing {package} into {env.path}")
        install_package(env, package, runner)
    finally:
        if indicator is not None:
            indicator.stop()
    log.info("environment %s ready", env.path)
    return True


def activate(
    env: EnvironmentDescriptor, environ: MutableMapping[str, str] | None = None
) -> MutableMapping[str, str]:
    """Point ``environ`` at the environment, like sourcing its activate script.

    With no mapping the host process's own ``os.environ`` is mutated.
    """
    target = os.environ if environ is None else environ
    bin_dir = str(env.bin_dir)
    target["VIRTUAL_ENV"] = str(env.path)
    path = target.get("PATH", "")
    entries = [entry for entry in path.split(os.pathsep) if entry and entry != bin_dir]
    target["PATH"] = os.pathsep.join([bin_dir, *entries])
    target.pop("PYTHONHOME", None)
    return target


def resolve_program(program: str, environ: MutableMapping[str, str]) -> str | None:
    """Resolve a program name or path against the mapping's PATH."""
    has_sep = os.path.sep in program or (
        os.path.altsep is not None and os.path.altsep in program
    )
    if has_sep:
        candidate = os.path.expanduser(program)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
        return None
    return shutil.which(program, path=environ.get("PATH", ""))


def build_bootstrap_indicator(env: EnvironmentDescriptor, package: str) -> WaitIndicator:
    """Build a spinner describing the bootstrap in progress."""
    return WaitIndicator(f"Preparing {package} in {env.path}")


def bootstrap(config: PairshConfig) -> bool:
    """Ensure the configured environment exists, with a spinner on first run."""
    env = EnvironmentDescriptor.from_path(config.venv_path)
    indicator = None if env.exists else build_bootstrap_indicator(env, config.package)
    return ensure_environment(env, config.package, indicator=indicator)
