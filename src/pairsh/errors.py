"""Exception types raised by pairsh."""


class PairshError(Exception):
    """Base class for errors reported to the user."""


class SpawnError(PairshError):
    """The child process could not be started."""


class BootstrapError(SpawnError):
    """The isolated environment could not be created or populated."""
