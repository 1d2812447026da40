"""Exception types raised by the renderer."""


class MCRayError(Exception):
    """Base class for all renderer errors."""


class DegenerateGeometryError(MCRayError, ValueError):
    """A zero-length vector reached a place that requires a direction.

    Raised for an eye position equal to the look-at point, an up vector
    parallel to the view direction, a zero-length ray direction, or a
    zero-length vector produced while tracing.
    """


class ConfigurationError(MCRayError, ValueError):
    """Render settings are out of range."""


class ImageWriteError(MCRayError, OSError):
    """The output image could not be created or written."""
