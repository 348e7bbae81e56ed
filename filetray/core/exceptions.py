"""Core custom exceptions for the package."""


class FileTrayError(Exception):
    """Base exception for file collection errors."""


class ConfigurationError(FileTrayError):
    """Exception for configuration-related errors (e.g., an unparsable allow-list)."""


class DuplicateIdError(FileTrayError):
    """Raised when the id factory hands out an id this collection already issued."""
