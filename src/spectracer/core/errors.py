"""Exception types raised by the renderer."""


class SpectracerError(Exception):
    """Base class for all renderer errors."""


class ConfigurationError(SpectracerError, ValueError):
    """A render configuration or scene was rejected before rendering began."""


class RenderError(SpectracerError, RuntimeError):
    """A render failed; no image buffer is produced.

    The exception that caused the failure is available as ``__cause__``.
    """
