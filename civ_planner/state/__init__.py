"""Loading map snapshots from disk."""

from .loaders import TileSnapshotModel, load_tile_map, tile_map_from_payload

__all__ = ["TileSnapshotModel", "load_tile_map", "tile_map_from_payload"]
