"""Collision mask derivation: one flag word per GID."""

import numpy as np
from typing import Iterable, Union

from tilelevel.model import COLLISION_SOLID


def build_collision_mask(
    tiles: Union[np.ndarray, Iterable[int]],
    solid_gids: Iterable[int] = (),
) -> np.ndarray:
    """
    Build the per-GID collision flags for a level.

    The mask has max(max(tiles), max(solid_gids), 0) + 1 entries. Every solid
    GID inside that range gets COLLISION_SOLID; negative GIDs have no slot and
    are skipped.

    Args:
        tiles: Flat GID sequence of the level
        solid_gids: GIDs considered collidable

    Returns:
        1D int32 array indexed by GID

    Example:
        >>> build_collision_mask([0, 1, 3], [3, 5]).tolist()
        [0, 0, 0, 1, 0, 1]
    """
    tiles = np.asarray(tiles if isinstance(tiles, np.ndarray) else list(tiles), dtype=np.int64)
    solid = np.asarray(list(solid_gids), dtype=np.int64)

    max_gid = 0
    if tiles.size:
        max_gid = max(max_gid, int(tiles.max()))
    if solid.size:
        max_gid = max(max_gid, int(solid.max()))

    flags = np.zeros(max_gid + 1, dtype=np.int32)
    in_range = solid[(solid >= 0) & (solid <= max_gid)]
    flags[in_range] |= COLLISION_SOLID
    return flags
