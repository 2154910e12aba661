class RenderError(Exception):
    """Base exception for all certificate rendering errors."""


class AssetError(RenderError):
    """Raised when a logo or header asset cannot be loaded.

    Never escapes AssetResolver; it is logged and the asset is dropped.
    """


class OutputWriteError(RenderError):
    """Raised when a finished certificate cannot be written to its destination."""
