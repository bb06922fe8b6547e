"""
In-memory level model.

LevelDefinition is the immutable result of one load. Tile and collision data
are held as read-only int32 numpy arrays; the `layout` field records whether
`tiles` is a row-major raster (Tiled levels) or column-major blocks (area
levels), and the accessors below translate grid coordinates accordingly.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple
import json

import numpy as np

from tilelevel.errors import DataIntegrityError, DIMENSION_MISMATCH

# Bit 0 of a collision flag word
COLLISION_SOLID = 0x1


class TileLayout(Enum):
    """Storage order of LevelDefinition.tiles."""
    ROW_MAJOR = "row-major"
    COLUMN_MAJOR = "column-major"


@dataclass(frozen=True)
class EntityDefinition:
    """An entity placed in a level, with string-valued extra properties."""
    type: str = "unknown"
    x: int = 0
    y: int = 0
    extras: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type,
            "x": self.x,
            "y": self.y,
            "extras": dict(self.extras),
        }


def _frozen_array(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=np.int32).ravel()
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class LevelDefinition:
    """
    Decoded level.

    Fields:
    - world, stage: Identifiers supplied by the caller
    - width, height: Grid size in tiles
    - tile_width, tile_height: Tile size in pixels
    - tileset_path: Tileset resource reference
    - tiles: width * height GIDs, ordered according to `layout`
    - collision_flags: Bitmask per GID (index = GID), bit 0 = solid
    - entities: Entity records in document order
    - layout: Storage order of `tiles`

    Raises:
        DataIntegrityError: If width or height is negative, or
            len(tiles) != width * height
    """
    world: int
    stage: int
    width: int
    height: int
    tile_width: int
    tile_height: int
    tileset_path: str
    tiles: np.ndarray
    collision_flags: np.ndarray
    entities: Tuple[EntityDefinition, ...] = ()
    layout: TileLayout = TileLayout.ROW_MAJOR

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise DataIntegrityError(
                f"Negative level size {self.width}x{self.height}",
                code=DIMENSION_MISMATCH,
            )
        tiles = _frozen_array(self.tiles)
        if tiles.size != self.width * self.height:
            raise DataIntegrityError(
                f"Tile count {tiles.size} does not match {self.width}x{self.height}",
                code=DIMENSION_MISMATCH,
            )
        object.__setattr__(self, "tiles", tiles)
        object.__setattr__(self, "collision_flags", _frozen_array(self.collision_flags))
        object.__setattr__(self, "entities", tuple(self.entities))

    @property
    def dimensions(self) -> Tuple[int, int, int, int]:
        """(width, height, tile_width, tile_height)"""
        return self.width, self.height, self.tile_width, self.tile_height

    @property
    def pixel_width(self) -> int:
        return self.width * self.tile_width

    @property
    def pixel_height(self) -> int:
        return self.height * self.tile_height

    def tile_at(self, x: int, y: int) -> int:
        """
        GID at grid column x, row y (row 0 at the top).

        Returns 0 for coordinates outside the grid.
        """
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return 0
        if self.layout is TileLayout.COLUMN_MAJOR:
            return int(self.tiles[x * self.height + y])
        return int(self.tiles[y * self.width + x])

    def grid(self) -> np.ndarray:
        """
        Read-only 2D view of the tiles with shape [height, width].

        The view is indexed [row, column] whatever the storage layout.
        """
        if self.layout is TileLayout.COLUMN_MAJOR:
            return self.tiles.reshape(self.width, self.height).T
        return self.tiles.reshape(self.height, self.width)

    def is_solid(self, gid: int) -> bool:
        """Whether bit 0 is set for gid. Unknown GIDs are not solid."""
        if gid < 0 or gid >= self.collision_flags.size:
            return False
        return bool(self.collision_flags[gid] & COLLISION_SOLID)

    def solid_gids(self) -> List[int]:
        """GIDs with the solid bit set, ascending."""
        return np.flatnonzero(self.collision_flags & COLLISION_SOLID).tolist()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "world": self.world,
            "stage": self.stage,
            "width": self.width,
            "height": self.height,
            "tileWidth": self.tile_width,
            "tileHeight": self.tile_height,
            "tileset": self.tileset_path,
            "layout": self.layout.value,
            "tiles": self.tiles.tolist(),
            "collisionFlags": self.collision_flags.tolist(),
            "entities": [e.to_dict() for e in self.entities],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class DecodedLevel:
    """
    Output of a schema decoder, before collision and entity processing.

    `solid_gids` and `raw_entities` are passed through from the document.
    """
    width: int
    height: int
    tile_width: int
    tile_height: int
    tileset_path: str
    tiles: np.ndarray
    layout: TileLayout
    solid_gids: List[int] = field(default_factory=list)
    raw_entities: Any = None
