"""Errors raised by tracevault."""


class TracevaultError(Exception):
    """Base exception for tracevault errors."""


class ConfigError(TracevaultError):
    """Raised when the configuration file cannot be loaded."""


class StoreUnavailableError(TracevaultError):
    """Raised when the artifact store has not been initialized."""


class CommitError(TracevaultError):
    """Raised when committing an artifact fails."""


class HistoryFetchError(TracevaultError):
    """Raised when the commit history of an artifact cannot be read."""


class LabelParseError(TracevaultError):
    """Raised when artifact content cannot be parsed for its revision."""


class BaselineNotFoundError(TracevaultError):
    """Raised when a baseline id does not exist in the project."""


class SnapshotNotFoundError(TracevaultError):
    """Raised when a version snapshot id does not exist in the project."""
