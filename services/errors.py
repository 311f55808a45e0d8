class PhotoPoetError(Exception):
    """Base exception for the PhotoPoet service."""


class ConfigurationError(PhotoPoetError):
    """Raised when the generation credential is not configured."""


class GenerationError(PhotoPoetError):
    """Raised when a remote generation request fails or is rejected."""


class InvalidTransitionError(PhotoPoetError):
    """Raised when a compose operation is not valid in the current screen."""
