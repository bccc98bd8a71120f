"""Exceptions raised while building or serving S-124 datasets.

Every error carries a ``status_code`` so a calling service can turn it into a
client response without inspecting the exception type.
"""


class S124Error(Exception):
    status_code = 400


class ValidationError(S124Error, ValueError):
    """Input rejected before any output is built."""


class UnsupportedGeometryError(S124Error, TypeError):
    """Geometry outside the supported point/line/polygon family."""


class MessageNotFoundError(S124Error, LookupError):
    status_code = 404


class ConfigurationError(S124Error):
    pass


class LoadError(S124Error):
    """Message JSON could not be read, parsed or fetched."""
