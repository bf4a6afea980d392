"""Model package for pairsh."""

from pairsh.models.environment import EnvironmentDescriptor
from pairsh.models.launch_config import LaunchConfig
from pairsh.models.pairsh_config import (
    DEFAULT_ARGS,
    DEFAULT_KEY_PREFIX,
    DEFAULT_PACKAGE,
    DEFAULT_PROGRAM,
    PairshConfig,
)

__all__ = [
    "DEFAULT_ARGS",
    "DEFAULT_KEY_PREFIX",
    "DEFAULT_PACKAGE",
    "DEFAULT_PROGRAM",
    "EnvironmentDescriptor",
    "LaunchConfig",
    "PairshConfig",
]
