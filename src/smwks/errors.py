"""
Common exceptions for smwks.
"""


class SmwksError(Exception):
    """Base exception for all smwks errors."""
    pass


class MalformedPayloadError(SmwksError, ValueError):
    """Raised when an artifact body cannot be parsed into the expected shape."""
    pass


class ShapeMismatchError(MalformedPayloadError):
    """Raised when a tuple has fewer fields than its schema."""
    pass
