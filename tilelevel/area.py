"""
Area level documents (levels/world<W>_stage<S>.area.json).

The level is described as a left-to-right sequence of columns:

    {
      "height": 15,
      "tileset": "tilesets/platformer16.png",
      "solidGids": [1, 2],
      "columns": [
        {"repeat": 20, "metatile": [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1]},
        {"repeat": 3, "metatile": [...], "rows": [{"from": 9, "to": 10, "gid": 2}]}
      ]
    }

Each column entry expands to a template of `height` GIDs: zeros, then the
`metatile` values from the top, then each `rows` override in list order.
The template is emitted `repeat` times. The expanded tiles are stored
column-major: all `height` GIDs of one column, then the next column.
"""

import numpy as np
from typing import Any, Dict, List, Optional

from tilelevel.errors import (
    SchemaError, DataIntegrityError,
    MISSING_COLUMNS, INVALID_FIELD, DIMENSION_MISMATCH, MALFORMED_TILE_DATA,
)
from tilelevel.csv_tiles import GID_MIN, GID_MAX
from tilelevel.model import DecodedLevel, LevelDefinition, TileLayout
from tilelevel.entities import entity_document
from tilelevel.tiled import DEFAULT_TILE_SIZE
from tilelevel.values import (
    ValueKind, kind_of, as_int, dimension_field, int_field, str_field, int_list_field,
)


def expand_column(column: Dict[str, Any], height: int) -> np.ndarray:
    """
    Build the GID template of one column entry.

    Args:
        column: Column entry with optional `metatile` and `rows`
        height: Level height in tiles

    Returns:
        1D int32 array of length `height`
    """
    template = np.zeros(max(height, 0), dtype=np.int32)

    metatile = column.get("metatile")
    if metatile is not None and kind_of(metatile) is ValueKind.ARRAY:
        for y, value in enumerate(metatile[:max(height, 0)]):
            template[y] = _gid(value, f"metatile[{y}]")

    rows = column.get("rows")
    if rows is not None and kind_of(rows) is ValueKind.ARRAY:
        for i, row in enumerate(rows):
            if kind_of(row) is not ValueKind.OBJECT:
                raise SchemaError(f"rows[{i}] must be an object", code=INVALID_FIELD)
            start = max(0, int_field(row, "from", 0))
            end = min(height - 1, int_field(row, "to", start))
            gid = _gid(row.get("gid", 0), f"rows[{i}].gid")
            if start <= end:
                template[start:end + 1] = gid

    return template


def decode_area(doc: Dict[str, Any], path: Optional[str] = None) -> DecodedLevel:
    """
    Decode an area document.

    A declared `width` is advisory: whenever the columns produce a nonzero
    width, that computed width is used instead.

    Args:
        doc: Parsed JSON object
        path: Source path, attached to errors

    Returns:
        DecodedLevel with column-major tiles

    Raises:
        SchemaError: If `columns` is missing or not an array (code MissingColumns)
            or `width`/`height` is mistyped or negative (code InvalidField)
        DataIntegrityError: If the expanded size does not match width * height
    """
    try:
        tile_width = int_field(doc, "tileWidth", DEFAULT_TILE_SIZE)
        tile_height = int_field(doc, "tileHeight", DEFAULT_TILE_SIZE)
        height = dimension_field(doc, "height", 0)
        tileset = str_field(doc, "tileset", "")
    except SchemaError as e:
        e.path = path
        raise

    columns = doc.get("columns")
    if columns is None or kind_of(columns) is not ValueKind.ARRAY:
        raise SchemaError("Area JSON requires a columns array", code=MISSING_COLUMNS, path=path)

    computed_width = 0
    blocks = []
    try:
        for i, column in enumerate(columns):
            if kind_of(column) is not ValueKind.OBJECT:
                raise SchemaError(f"columns[{i}] must be an object", code=INVALID_FIELD)
            repeat = max(1, int_field(column, "repeat", 1))
            template = expand_column(column, height)
            blocks.append(np.tile(template, repeat))
            computed_width += repeat
    except (SchemaError, DataIntegrityError) as e:
        e.path = path
        raise

    try:
        width = dimension_field(doc, "width", computed_width)
        solid_gids = int_list_field(doc, "solidGids")
    except SchemaError as e:
        e.path = path
        raise
    if width != computed_width and computed_width != 0:
        width = computed_width

    tiles = np.concatenate(blocks) if blocks else np.zeros(0, dtype=np.int32)
    if tiles.size != width * height:
        raise DataIntegrityError(
            f"Expanded column data has {tiles.size} cells, expected {width}x{height}",
            code=DIMENSION_MISMATCH,
            path=path,
        )

    return DecodedLevel(
        width=width,
        height=height,
        tile_width=tile_width,
        tile_height=tile_height,
        tileset_path=tileset,
        tiles=tiles.astype(np.int32, copy=False),
        layout=TileLayout.COLUMN_MAJOR,
        solid_gids=solid_gids,
        raw_entities=doc.get("entities"),
    )


def encode_area_columns(tiles: np.ndarray, height: int) -> List[Dict[str, Any]]:
    """
    Run-length encode column-major tiles into area column entries.

    Consecutive identical columns collapse into one entry with `repeat`.
    Each entry carries its full column as `metatile`.

    Args:
        tiles: Column-major GIDs, length width * height
        height: Level height in tiles

    Returns:
        List of column entries that expand back to `tiles`
    """
    tiles = np.asarray(tiles, dtype=np.int32).ravel()
    if height <= 0 or tiles.size == 0:
        return []
    if tiles.size % height:
        raise ValueError(f"{tiles.size} tiles do not divide into columns of {height}")

    columns = tiles.reshape(-1, height)
    entries = []
    current = columns[0]
    repeat = 1

    for column in columns[1:]:
        if np.array_equal(column, current):
            repeat += 1
        else:
            entries.append(_column_entry(current, repeat))
            current = column
            repeat = 1

    entries.append(_column_entry(current, repeat))
    return entries


def to_area_document(level: LevelDefinition) -> Dict[str, Any]:
    """
    Build an area document describing `level`.

    Row-major levels are transposed into columns first.
    """
    column_major = level.grid().T.ravel()
    return {
        "tileWidth": level.tile_width,
        "tileHeight": level.tile_height,
        "width": level.width,
        "height": level.height,
        "tileset": level.tileset_path,
        "solidGids": level.solid_gids(),
        "columns": encode_area_columns(column_major, level.height),
        "entities": [entity_document(e) for e in level.entities],
    }


def _column_entry(column: np.ndarray, repeat: int) -> Dict[str, Any]:
    entry = {"metatile": column.tolist()}
    if repeat > 1:
        entry["repeat"] = repeat
    return entry


def _gid(value: Any, name: str) -> int:
    try:
        gid = as_int(value, name)
    except SchemaError as e:
        raise DataIntegrityError(str(e), code=MALFORMED_TILE_DATA) from e
    if gid < GID_MIN or gid > GID_MAX:
        raise DataIntegrityError(f"{name} value {gid} out of range", code=MALFORMED_TILE_DATA)
    return gid
