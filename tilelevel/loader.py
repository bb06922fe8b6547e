"""
Level loading: format selection, decoding and assembly.

For world W, stage S two files are candidates:

    levels/worldW_stageS.json        Tiled-style document (preferred)
    levels/worldW_stageS.area.json   area document (fallback)

The first one that exists is decoded; the result is assembled into an
immutable LevelDefinition. Loading is stateless: every intermediate value is
local to one call, and a call either returns a complete level or raises.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from tilelevel.area import decode_area
from tilelevel.assets import AssetReader
from tilelevel.collision import build_collision_mask
from tilelevel.entities import coerce_entities
from tilelevel.errors import AssetAccessError, LevelLoadError, LevelNotFoundError
from tilelevel.model import DecodedLevel, LevelDefinition
from tilelevel.tiled import decode_tiled
from tilelevel.values import parse_document

DEFAULT_LEVELS_DIR = "levels"
TILED_SUFFIX = ".json"
AREA_SUFFIX = ".area.json"

_LEVEL_FILE = re.compile(r"world(\d+)_stage(\d+)(\.area)?\.json")


class LevelFormat(Enum):
    TILED = "tiled"
    AREA = "area"


_DECODERS: Dict[LevelFormat, Callable[..., DecodedLevel]] = {
    LevelFormat.TILED: decode_tiled,
    LevelFormat.AREA: decode_area,
}


def level_paths(
    world: int,
    stage: int,
    levels_dir: str = DEFAULT_LEVELS_DIR,
) -> Tuple[str, str]:
    """
    Candidate asset paths for a world/stage.

    Returns:
        (tiled_path, area_path), in the order they are probed
    """
    base = f"world{world}_stage{stage}"
    prefix = f"{levels_dir.rstrip('/')}/" if levels_dir else ""
    return f"{prefix}{base}{TILED_SUFFIX}", f"{prefix}{base}{AREA_SUFFIX}"


def select_format(
    reader: AssetReader,
    world: int,
    stage: int,
    levels_dir: str = DEFAULT_LEVELS_DIR,
) -> Tuple[LevelFormat, str]:
    """
    Pick the file to decode for a world/stage.

    The Tiled file always wins when both exist.

    Raises:
        LevelNotFoundError: If neither candidate exists
    """
    tiled_path, area_path = level_paths(world, stage, levels_dir)
    if reader.exists(tiled_path):
        return LevelFormat.TILED, tiled_path
    if reader.exists(area_path):
        return LevelFormat.AREA, area_path
    raise LevelNotFoundError(
        f"Level asset not found for world {world} stage {stage}",
        path=f"{tiled_path} | {area_path}",
    )


def decode_level_bytes(data: bytes, fmt: LevelFormat, path: Optional[str] = None) -> DecodedLevel:
    """Parse and decode raw document bytes with the decoder for `fmt`."""
    doc = parse_document(data, path=path)
    return _DECODERS[fmt](doc, path=path)


def assemble_level(world: int, stage: int, decoded: DecodedLevel) -> LevelDefinition:
    """
    Combine decoder output, collision mask and entities into a LevelDefinition.

    Collision and entity processing both finish before the level is built.
    """
    collision_flags = build_collision_mask(decoded.tiles, decoded.solid_gids)
    entities = coerce_entities(decoded.raw_entities)

    return LevelDefinition(
        world=world,
        stage=stage,
        width=decoded.width,
        height=decoded.height,
        tile_width=decoded.tile_width,
        tile_height=decoded.tile_height,
        tileset_path=decoded.tileset_path,
        tiles=decoded.tiles,
        collision_flags=collision_flags,
        entities=tuple(entities),
        layout=decoded.layout,
    )


def load_level(
    reader: AssetReader,
    world: int,
    stage: int,
    levels_dir: str = DEFAULT_LEVELS_DIR,
) -> LevelDefinition:
    """
    Load and decode the level for a world/stage.

    Args:
        reader: Asset source
        world: World number, stamped onto the result
        stage: Stage number, stamped onto the result
        levels_dir: Asset directory holding level files

    Returns:
        Fully populated LevelDefinition

    Raises:
        LevelNotFoundError: If no level file exists
        AssetAccessError: If the file cannot be read completely
        SchemaError: If a required field is missing or mistyped
        UnsupportedFormatError: If the tile layer is not csv
        DataIntegrityError: If tile data is malformed or mis-sized

    Example:
        >>> reader = DirectoryAssetReader("assets")
        >>> level = load_level(reader, 1, 1)
        >>> level.dimensions
        (128, 15, 16, 16)
    """
    fmt, path = select_format(reader, world, stage, levels_dir)
    try:
        data = reader.read(path)
    except OSError as e:
        raise AssetAccessError(f"Failed to read asset: {e}", path=path) from e
    decoded = decode_level_bytes(data, fmt, path=path)
    return assemble_level(world, stage, decoded)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of try_load_level(): exactly one of `level` and `error` is set."""
    level: Optional[LevelDefinition] = None
    error: Optional[LevelLoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> LevelDefinition:
        """Return the level, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.level


def try_load_level(
    reader: AssetReader,
    world: int,
    stage: int,
    levels_dir: str = DEFAULT_LEVELS_DIR,
) -> LoadResult:
    """Like load_level(), but returns level loading errors in a LoadResult."""
    try:
        return LoadResult(level=load_level(reader, world, stage, levels_dir))
    except LevelLoadError as e:
        return LoadResult(error=e)


def parse_level_filename(name: str) -> Optional[Tuple[int, int, LevelFormat]]:
    """
    Parse "world1_stage2.json" / "world1_stage2.area.json".

    Returns:
        (world, stage, format), or None if the name is not a level file
    """
    match = _LEVEL_FILE.fullmatch(name.rsplit("/", 1)[-1])
    if not match:
        return None
    fmt = LevelFormat.AREA if match.group(3) else LevelFormat.TILED
    return int(match.group(1)), int(match.group(2)), fmt


def discover_levels(asset_paths: Iterable[str]) -> List[Tuple[int, int]]:
    """Sorted unique (world, stage) pairs among the given asset paths."""
    found = set()
    for path in asset_paths:
        parsed = parse_level_filename(path)
        if parsed:
            found.add(parsed[:2])
    return sorted(found)


class LevelLoader:
    """
    load_level() bound to one reader and levels directory.

    Holds no per-load state; one instance can serve concurrent callers.
    """

    def __init__(self, reader: AssetReader, levels_dir: str = DEFAULT_LEVELS_DIR):
        self.reader = reader
        self.levels_dir = levels_dir

    def exists(self, world: int, stage: int) -> bool:
        return any(self.reader.exists(p) for p in level_paths(world, stage, self.levels_dir))

    def select(self, world: int, stage: int) -> Tuple[LevelFormat, str]:
        return select_format(self.reader, world, stage, self.levels_dir)

    def load(self, world: int, stage: int) -> LevelDefinition:
        return load_level(self.reader, world, stage, self.levels_dir)

    def try_load(self, world: int, stage: int) -> LoadResult:
        return try_load_level(self.reader, world, stage, self.levels_dir)

    def __call__(self, world: int, stage: int) -> LevelDefinition:
        return self.load(world, stage)
