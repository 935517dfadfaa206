"""Preen error hierarchy.

All preen-specific errors inherit from PreenError for easy catching.
"""


class PreenError(Exception):
    """Base error for all preen operations."""


class ConfigError(PreenError):
    """Invalid or missing configuration."""


class DataLoadError(PreenError):
    """A data file exists but could not be parsed into a mapping."""


class TemplateError(PreenError):
    """The template could not be read or rendered.

    The underlying engine exception, when there is one, is chained as
    ``__cause__``.
    """


class TransportError(PreenError):
    """A live-reload event could not be delivered to a connection."""
