"""Shatter error types."""


class ShatterError(ValueError):
    """Base class for precondition violations raised by shatterfx."""


class InvalidGeometry(ShatterError):
    """Image size has a non-positive dimension."""


class InvalidGrid(ShatterError):
    """Grid resolution has a dimension below one."""


class MissingTexture(ShatterError):
    """Shatter requested for an image with no drawable source."""


class InvalidProgress(ShatterError):
    """Progress value outside [0, 1] passed to a strict evaluation."""
