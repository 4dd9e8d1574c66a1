from __future__ import annotations


class RepixelError(Exception):
    """Base class for errors raised by repixel."""


class InvalidInput(RepixelError, ValueError):
    """Pixel grid does not match its declared dimensions."""


class ImageLoadError(RepixelError):
    pass


class ExportError(RepixelError):
    pass


class ConfigError(RepixelError):
    pass
