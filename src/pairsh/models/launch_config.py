"""Child process launch model."""

from dataclasses import dataclass


@dataclass
class LaunchConfig:
    """How to launch the pair-programming tool as a child process."""

    argv: list[str]
    env: dict[str, str]
    cwd: str | None = None
