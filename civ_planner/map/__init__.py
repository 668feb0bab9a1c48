"""Hex map geometry and tile snapshots."""

from .coordinates import HexCoord, coord_key, parse_coord_key
from .tiles import Resource, Tile, TileMap, tile_map

__all__ = [
    "HexCoord",
    "Resource",
    "Tile",
    "TileMap",
    "coord_key",
    "parse_coord_key",
    "tile_map",
]
