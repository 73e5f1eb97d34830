"""Common firebreak-specific exceptions."""

class FirebreakValueError(ValueError):
    """Raised when firebreak detects an invalid request or input file."""


__all__ = ["FirebreakValueError"]
