"""Exception types raised and recorded during an install pass."""


class StagerError(Exception):
    """Base class for all stager failures."""
    pass


class UsageError(StagerError):
    """A caller passed invalid or missing arguments to an install operation.

    Usage errors are fatal: they abort the whole configuration pass.
    """
    pass


class ConfigError(StagerError):
    """A configuration or build description file could not be read."""
    pass


class ConfigurationWarning(UserWarning):
    """A non-fatal problem; the affected operation is skipped."""
    pass
