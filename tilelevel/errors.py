"""
Error taxonomy for level loading.

Every failure raised by the decoding pipeline is a LevelLoadError subclass
carrying a stable ``code`` so callers can branch without parsing messages.
"""

from typing import Optional


class LevelLoadError(Exception):
    """Base class for all level loading failures."""

    code = "LevelLoad"

    def __init__(self, message: str, code: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message)
        if code is not None:
            self.code = code
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            return f"{message} ({self.path})"
        return message


class AssetAccessError(LevelLoadError):
    """Resource could not be read, or was read only partially."""

    code = "AssetAccess"


class LevelNotFoundError(LevelLoadError):
    """Neither the Tiled nor the area file exists for a world/stage."""

    code = "LevelNotFound"


class SchemaError(LevelLoadError, ValueError):
    """A required field is missing or has the wrong shape."""

    code = "Schema"


class UnsupportedFormatError(LevelLoadError, ValueError):
    """Tile layer uses an encoding other than csv."""

    code = "UnsupportedEncoding"


class DataIntegrityError(LevelLoadError, ValueError):
    """Tile data is malformed or does not match the declared dimensions."""

    code = "DataIntegrity"


# Codes
MISSING_LAYERS = "MissingLayers"
MISSING_COLUMNS = "MissingColumns"
MALFORMED_DOCUMENT = "MalformedDocument"
INVALID_FIELD = "InvalidField"
INVALID_ENTITY = "InvalidEntity"
MALFORMED_TILE_DATA = "MalformedTileData"
DIMENSION_MISMATCH = "DimensionMismatch"
