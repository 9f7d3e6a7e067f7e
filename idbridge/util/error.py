"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Configuration error."""

    pass


class SigningError(UtilError):
    """Signed link could not be created or verified."""

    pass
