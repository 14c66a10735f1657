"""Exception types raised by rom_inspector."""

from typing import Optional


class RomInspectorError(Exception):
    """Base class for every error raised by this package."""


class RomFileError(RomInspectorError):
    """ROM image could not be accepted (missing, wrong extension or size)."""


class SchemaError(RomInspectorError):
    """Definition document could not be loaded into a schema tree."""


class DefinitionError(RomInspectorError):
    """A single schema leaf is malformed and cannot be resolved."""

    def __init__(self, message: str, route: Optional[str] = None):
        self.route = route
        if route:
            message = f"{route}: {message}"
        super().__init__(message)
