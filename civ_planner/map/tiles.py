"""Tile snapshots and the vocabulary the adjacency rules read."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .coordinates import HexCoord, coord_key

TERRAINS: Tuple[str, ...] = (
    "grassland",
    "plains",
    "desert",
    "tundra",
    "snow",
    "coast",
    "ocean",
)
WATER_TERRAINS: Tuple[str, ...] = ("coast", "ocean")

TERRAIN_MODIFIERS: Tuple[str, ...] = ("hills", "mountain")

FEATURES: Tuple[str, ...] = (
    "woods",
    "rainforest",
    "marsh",
    "floodplains",
    "reef",
    "geothermal",
    "volcanic_soil",
    "oasis",
    "cliffs",
)

RESOURCE_TYPES: Tuple[str, ...] = ("strategic", "luxury", "bonus")

IMPROVEMENTS: Tuple[str, ...] = (
    "farm",
    "mine",
    "quarry",
    "plantation",
    "camp",
    "pasture",
    "fishing_boats",
    "lumber_mill",
    "oil_well",
    "offshore_platform",
    "seaside_resort",
    "ski_resort",
    "fort",
    "airstrip",
    "missile_silo",
)

DISTRICT_TYPES: Tuple[str, ...] = (
    "city_center",
    "campus",
    "holy_site",
    "theater_square",
    "commercial_hub",
    "harbor",
    "industrial_zone",
    "encampment",
    "entertainment_complex",
    "water_park",
    "aerodrome",
    "spaceport",
    "government_plaza",
    "diplomatic_quarter",
    "neighborhood",
    "aqueduct",
    "dam",
    "canal",
    "preserve",
)

NO_RIVERS: Tuple[bool, ...] = (False,) * 6


@dataclass(frozen=True)
class Resource:
    name: str
    type: str
    revealed: bool = True


@dataclass(frozen=True)
class Tile:
    """Read-only snapshot of one map tile.

    Static attributes (terrain, modifier, features, resource, rivers) never
    change during a game; improvement, district and wonder reflect the
    current state of the tile.
    """

    coord: HexCoord
    terrain: str = "grassland"
    modifier: Optional[str] = None
    features: Tuple[str, ...] = tuple()
    resource: Optional[Resource] = None
    river_edges: Tuple[bool, ...] = NO_RIVERS
    improvement: Optional[str] = None
    district: Optional[str] = None
    wonder: Optional[str] = None
    owning_city_id: Optional[str] = None
    is_pillaged: bool = False
    is_locked: bool = False

    @property
    def key(self) -> str:
        return coord_key(self.coord)

    def has_feature(self, feature: str) -> bool:
        return feature in self.features

    def has_river(self) -> bool:
        return any(self.river_edges)

    @property
    def is_water(self) -> bool:
        return self.terrain in WATER_TERRAINS

    @property
    def is_mountain(self) -> bool:
        return self.modifier == "mountain"


# Tile maps are keyed by coord_key(tile.coord)
TileMap = Mapping[str, Tile]


def tile_map(tiles: Iterable[Tile]) -> Dict[str, Tile]:
    """Index ``tiles`` by their coordinate key; later tiles win on collision."""
    return {coord_key(t.coord): t for t in tiles}


def get_tile(tiles: TileMap, coord: HexCoord) -> Optional[Tile]:
    return tiles.get(coord_key(coord))


__all__ = [
    "DISTRICT_TYPES",
    "FEATURES",
    "IMPROVEMENTS",
    "NO_RIVERS",
    "RESOURCE_TYPES",
    "Resource",
    "TERRAINS",
    "TERRAIN_MODIFIERS",
    "Tile",
    "TileMap",
    "WATER_TERRAINS",
    "get_tile",
    "tile_map",
]
