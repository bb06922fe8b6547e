"""
CSV tile layer codec.

A CSV layer is a single string of comma-separated GIDs in row-major order:

    "1, 1, 0,
     2, 2, 2"

Decoding rules:
- Each cell is trimmed of surrounding whitespace (newlines included)
- An empty cell decodes to 0
- Any other cell must be a base-10 integer with an optional sign
- A single trailing comma does not produce an extra cell
- An empty string decodes to no cells
"""

import re
import numpy as np
from typing import Iterable, Optional, Union

from tilelevel.errors import DataIntegrityError, MALFORMED_TILE_DATA

# Tile GIDs are stored as int32
GID_MIN = -(2 ** 31)
GID_MAX = 2 ** 31 - 1

_INT_CELL = re.compile(r"[+-]?[0-9]+\Z")


def parse_csv_tiles(data: str) -> np.ndarray:
    """
    Parse a CSV layer string into a flat int32 array.

    Args:
        data: Comma-separated GIDs

    Returns:
        1D int32 numpy array in source order

    Raises:
        DataIntegrityError: If a cell is not an integer or does not fit int32
    """
    cells = data.split(",")
    if cells[-1] == "":
        cells.pop()

    values = []
    for i, cell in enumerate(cells):
        cell = cell.strip()
        if not cell:
            values.append(0)
            continue
        if not _INT_CELL.match(cell):
            raise DataIntegrityError(
                f"Malformed tile value {cell!r} at cell {i}",
                code=MALFORMED_TILE_DATA,
            )
        value = int(cell)
        if value < GID_MIN or value > GID_MAX:
            raise DataIntegrityError(
                f"Tile value {value} at cell {i} out of range",
                code=MALFORMED_TILE_DATA,
            )
        values.append(value)

    return np.array(values, dtype=np.int32)


def encode_csv_tiles(
    tiles: Union[np.ndarray, Iterable[int]],
    width: Optional[int] = None,
) -> str:
    """
    Encode tiles as a CSV layer string.

    Args:
        tiles: Flat GID sequence
        width: If given, break lines after every `width` cells (one grid row
               per line, as Tiled writes it)

    Returns:
        CSV string that parse_csv_tiles() decodes back to the same sequence
    """
    if not isinstance(tiles, np.ndarray):
        tiles = list(tiles)
    values = [str(int(v)) for v in np.asarray(tiles, dtype=np.int64).ravel()]

    if not width or width <= 0:
        return ",".join(values)

    rows = [",".join(values[i:i + width]) for i in range(0, len(values), width)]
    return ",\n".join(rows)
