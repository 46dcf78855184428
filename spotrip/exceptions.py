"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class SpotripError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(SpotripError):
    """Raised for issues related to configuration loading or validation."""


class SessionError(SpotripError):
    """Raised when a catalog session cannot be created or authenticated."""


class InvalidReferenceError(SpotripError):
    """Raised when a catalog URL, URI or ID cannot be parsed."""


class UnsupportedFormatError(SpotripError):
    """
    Raised when a track is not available in any encoding from the preference list.
    """


class NoCoverError(SpotripError):
    """Raised when a track's album has no cover art to embed."""


class LocalWriteError(SpotripError):
    """Raised when a downloaded track cannot be written to the local file system."""
