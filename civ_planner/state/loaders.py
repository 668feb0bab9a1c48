"""Utilities for loading map snapshots into tile maps.

A snapshot is a JSON or YAML document whose ``tiles`` entry is one of:

* a list of tile objects, each carrying ``coord: {q, r}``
* a mapping of ``"q,r"`` keys to tile objects
* a list of ``["q,r", tile]`` pairs, as written by the planner's save files

Tile fields may be spelled in camelCase (``riverEdges``) or snake_case
(``river_edges``).
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..map.coordinates import HexCoord, coord_key, parse_coord_key
from ..map.tiles import (
    DISTRICT_TYPES,
    FEATURES,
    IMPROVEMENTS,
    RESOURCE_TYPES,
    TERRAIN_MODIFIERS,
    TERRAINS,
    Resource,
    Tile,
)

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def _check_vocab(value: Optional[str], allowed: Tuple[str, ...], what: str) -> Optional[str]:
    if value is not None and value not in allowed:
        raise ValueError(f"unknown {what} '{value}'")
    return value


class CoordModel(BaseModel):
    q: int
    r: int


class ResourceModel(BaseModel):
    name: str
    type: str
    revealed: bool = True

    @field_validator("type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        return _check_vocab(v, RESOURCE_TYPES, "resource type")


class TileSnapshotModel(BaseModel):
    """Validated shape of one tile in a snapshot document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    coord: Optional[CoordModel] = None
    terrain: str = "grassland"
    modifier: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    resource: Optional[ResourceModel] = None
    river_edges: List[bool] = Field(default_factory=lambda: [False] * 6, alias="riverEdges")
    improvement: Optional[str] = None
    district: Optional[str] = None
    wonder: Optional[str] = None
    owning_city_id: Optional[str] = Field(default=None, alias="owningCityId")
    is_pillaged: bool = Field(default=False, alias="isPillaged")
    is_locked: bool = Field(default=False, alias="isLocked")

    @field_validator("terrain")
    @classmethod
    def _known_terrain(cls, v: str) -> str:
        return _check_vocab(v, TERRAINS, "terrain")

    @field_validator("modifier")
    @classmethod
    def _known_modifier(cls, v: Optional[str]) -> Optional[str]:
        return _check_vocab(v, TERRAIN_MODIFIERS, "terrain modifier")

    @field_validator("features")
    @classmethod
    def _known_features(cls, v: List[str]) -> List[str]:
        for feature in v:
            _check_vocab(feature, FEATURES, "feature")
        return v

    @field_validator("improvement")
    @classmethod
    def _known_improvement(cls, v: Optional[str]) -> Optional[str]:
        return _check_vocab(v, IMPROVEMENTS, "improvement")

    @field_validator("district")
    @classmethod
    def _known_district(cls, v: Optional[str]) -> Optional[str]:
        return _check_vocab(v, DISTRICT_TYPES, "district")

    @field_validator("river_edges")
    @classmethod
    def _six_edges(cls, v: List[bool]) -> List[bool]:
        if len(v) > 6:
            raise ValueError(f"expected at most 6 river edges, got {len(v)}")
        return list(v) + [False] * (6 - len(v))

    def to_tile(self, coord: HexCoord) -> Tile:
        resource = None
        if self.resource is not None:
            resource = Resource(
                name=self.resource.name,
                type=self.resource.type,
                revealed=self.resource.revealed,
            )
        return Tile(
            coord=coord,
            terrain=self.terrain,
            modifier=self.modifier,
            features=tuple(self.features),
            resource=resource,
            river_edges=tuple(self.river_edges),
            improvement=self.improvement,
            district=self.district,
            wonder=self.wonder,
            owning_city_id=self.owning_city_id,
            is_pillaged=self.is_pillaged,
            is_locked=self.is_locked,
        )


def _entries(raw_tiles: Any) -> List[Tuple[Optional[str], Any]]:
    if isinstance(raw_tiles, dict):
        return [(str(k), v) for k, v in raw_tiles.items()]
    if isinstance(raw_tiles, list):
        out: List[Tuple[Optional[str], Any]] = []
        for item in raw_tiles:
            if isinstance(item, (list, tuple)) and len(item) == 2:
                out.append((str(item[0]), item[1]))
            else:
                out.append((None, item))
        return out
    raise ValueError("'tiles' must be a list or a mapping")


def _build_tile(key: Optional[str], block: Any) -> Tile:
    label = key if key is not None else "<list entry>"
    try:
        model = TileSnapshotModel.model_validate(block)
    except ValidationError as exc:
        raise ValueError(f"Invalid tile {label}: {exc}") from exc

    coord_from_block = HexCoord(model.coord.q, model.coord.r) if model.coord else None
    coord_from_key = parse_coord_key(key) if key is not None else None
    if coord_from_block is None and coord_from_key is None:
        raise ValueError(f"Tile {label} has no coordinate")
    if coord_from_block and coord_from_key and coord_from_block != coord_from_key:
        raise ValueError(
            f"Tile key {key} disagrees with its coord {coord_key(coord_from_block)}"
        )
    return model.to_tile(coord_from_block or coord_from_key)


def tile_map_from_payload(payload: Any) -> Dict[str, Tile]:
    """Build a tile map from an already-parsed snapshot document."""
    if not isinstance(payload, dict) or "tiles" not in payload:
        raise ValueError("Snapshot must be a mapping with a 'tiles' entry")
    tiles: Dict[str, Tile] = {}
    for key, block in _entries(payload["tiles"]):
        tile = _build_tile(key, block)
        if tile.key in tiles:
            logger.warning("duplicate_tile_in_snapshot", coord=tile.key)
        tiles[tile.key] = tile
    return tiles


def _read_document(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        text = handle.read()
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValueError(f"Could not parse snapshot {path}: {exc}") from exc


def load_tile_map(path: PathLike) -> Dict[str, Tile]:
    """Load a tile map from a JSON or YAML snapshot file.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the document or any tile in it is invalid
    """
    candidate = Path(path)
    if not candidate.exists():
        raise FileNotFoundError(f"Map snapshot not found: {path}")
    tiles = tile_map_from_payload(_read_document(candidate))
    logger.info("tile_map_loaded", path=str(candidate), tiles=len(tiles))
    return tiles


__all__ = [
    "TileSnapshotModel",
    "load_tile_map",
    "tile_map_from_payload",
]
