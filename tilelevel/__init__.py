"""
tilelevel - Decode tile-based game levels from JSON level files.

Two level schemas are read from an asset store:
- levels/world<W>_stage<S>.json (Tiled-style, CSV tile layer, preferred)
- levels/world<W>_stage<S>.area.json (column/metatile area format, fallback)

Both decode to the same immutable LevelDefinition: tile grid, per-GID
collision flags, tileset reference and entities.
"""

__version__ = "0.1.0"

from tilelevel.assets import AssetReader, DirectoryAssetReader, ZipAssetReader, MemoryAssetReader
from tilelevel.errors import (
    LevelLoadError, AssetAccessError, LevelNotFoundError,
    SchemaError, UnsupportedFormatError, DataIntegrityError,
)
from tilelevel.loader import LevelLoader, LoadResult, load_level, try_load_level
from tilelevel.model import LevelDefinition, EntityDefinition, TileLayout
from tilelevel.repository import LevelRepository

__all__ = [
    "AssetReader",
    "DirectoryAssetReader",
    "ZipAssetReader",
    "MemoryAssetReader",
    "LevelLoadError",
    "AssetAccessError",
    "LevelNotFoundError",
    "SchemaError",
    "UnsupportedFormatError",
    "DataIntegrityError",
    "LevelLoader",
    "LoadResult",
    "load_level",
    "try_load_level",
    "LevelDefinition",
    "EntityDefinition",
    "TileLayout",
    "LevelRepository",
]
