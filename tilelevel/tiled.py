"""
Tiled-style level documents (levels/world<W>_stage<S>.json).

Document structure:

    {
      "width": 128, "height": 15,
      "tileWidth": 16, "tileHeight": 16,
      "tileset": "tilesets/platformer16.png",
      "solidGids": [1, 2, 3],
      "layers": [{"name": "ground", "encoding": "csv", "data": "1,1,0,..."}],
      "entities": [{"type": "coin", "x": 320, "y": 160}]
    }

`tilewidth`/`tileheight` (Tiled's own spelling) are accepted as aliases.
Only the first layer is read.
"""

from typing import Any, Dict, Optional

from tilelevel.csv_tiles import parse_csv_tiles, encode_csv_tiles
from tilelevel.errors import (
    SchemaError, UnsupportedFormatError, DataIntegrityError,
    MISSING_LAYERS, DIMENSION_MISMATCH,
)
from tilelevel.entities import entity_document
from tilelevel.model import DecodedLevel, LevelDefinition, TileLayout
from tilelevel.values import (
    ValueKind, kind_of, dimension_field, int_field, str_field, int_list_field,
)

DEFAULT_TILE_SIZE = 16
CSV_ENCODING = "csv"


def decode_tiled(doc: Dict[str, Any], path: Optional[str] = None) -> DecodedLevel:
    """
    Decode a Tiled-style document.

    Args:
        doc: Parsed JSON object
        path: Source path, attached to errors

    Returns:
        DecodedLevel with row-major tiles

    Raises:
        SchemaError: If `layers` is missing or empty (code MissingLayers), or a
            header field is mistyped or a negative dimension (code InvalidField)
        UnsupportedFormatError: If the first layer is not csv-encoded
        DataIntegrityError: If tile data is malformed or the wrong size
    """
    try:
        width = dimension_field(doc, "width", 0)
        height = dimension_field(doc, "height", 0)
        tile_width = _tile_size(doc, "tileWidth", "tilewidth")
        tile_height = _tile_size(doc, "tileHeight", "tileheight")
        tileset = str_field(doc, "tileset", "")
    except SchemaError as e:
        e.path = path
        raise

    layers = doc.get("layers")
    if layers is None or kind_of(layers) is not ValueKind.ARRAY or not layers:
        raise SchemaError("Level JSON missing layers array", code=MISSING_LAYERS, path=path)

    layer = layers[0]
    if kind_of(layer) is not ValueKind.OBJECT:
        raise SchemaError("layers[0] must be an object", code=MISSING_LAYERS, path=path)

    encoding = layer.get("encoding")
    if encoding != CSV_ENCODING:
        raise UnsupportedFormatError(
            f"Only CSV-encoded layers are supported, got {encoding!r}", path=path
        )

    try:
        data = str_field(layer, "data", "")
        tiles = parse_csv_tiles(data)
    except (SchemaError, DataIntegrityError) as e:
        e.path = path
        raise

    if tiles.size != width * height:
        raise DataIntegrityError(
            f"CSV tile data has {tiles.size} cells, expected {width}x{height}",
            code=DIMENSION_MISMATCH,
            path=path,
        )

    try:
        solid_gids = int_list_field(doc, "solidGids")
    except SchemaError as e:
        e.path = path
        raise

    return DecodedLevel(
        width=width,
        height=height,
        tile_width=tile_width,
        tile_height=tile_height,
        tileset_path=tileset,
        tiles=tiles,
        layout=TileLayout.ROW_MAJOR,
        solid_gids=solid_gids,
        raw_entities=doc.get("entities"),
    )


def to_tiled_document(level: LevelDefinition, layer_name: str = "ground") -> Dict[str, Any]:
    """
    Build a Tiled-style document describing `level`.

    Column-major levels are rewritten as a row-major raster. Entity extras
    are written back as string properties.
    """
    raster = level.grid().ravel()
    return {
        "width": level.width,
        "height": level.height,
        "tileWidth": level.tile_width,
        "tileHeight": level.tile_height,
        "tileset": level.tileset_path,
        "solidGids": level.solid_gids(),
        "layers": [
            {
                "name": layer_name,
                "encoding": CSV_ENCODING,
                "data": encode_csv_tiles(raster, width=level.width),
            }
        ],
        "entities": [entity_document(e) for e in level.entities],
    }


def _tile_size(doc: Dict[str, Any], name: str, alias: str) -> int:
    """Read a tile size field, falling back to its lowercase alias only when absent."""
    if doc.get(name) is not None:
        return int_field(doc, name, DEFAULT_TILE_SIZE)
    return int_field(doc, alias, DEFAULT_TILE_SIZE)
