"""Whole-map adjacency overlays and placement rankings."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..map.coordinates import HexCoord
from ..map.tiles import Tile, TileMap
from .calculator import (
    SUGGESTED_DISTRICTS,
    adjacency_color_for_bonus,
    adjacency_rating,
    calculate_adjacency,
    calculate_all_adjacencies,
)
from .rules import can_place_district
from .types import AdjacencyResult

# Districts a map overlay can be drawn for
OVERLAY_DISTRICTS: tuple[str, ...] = SUGGESTED_DISTRICTS


@dataclass(frozen=True)
class Placement:
    coord: HexCoord
    result: AdjacencyResult

    @property
    def bonus(self) -> int:
        return self.result.bonus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coord": self.coord.key,
            "rating": adjacency_rating(self.bonus),
            "color": adjacency_color_for_bonus(self.bonus),
            **self.result.to_dict(),
        }


def adjacency_overlay(
    tiles: TileMap,
    district: str,
    civ_id: Optional[str] = None,
) -> Dict[str, AdjacencyResult]:
    """Score ``district`` on every tile that could host it.

    Returns:
        Dict of coordinate key -> AdjacencyResult
    """
    overlay: Dict[str, AdjacencyResult] = {}
    for key, tile in tiles.items():
        if not isinstance(tile, Tile) or not can_place_district(tile, district):
            continue
        overlay[key] = calculate_adjacency(tile.coord, district, tiles, civ_id)
    return overlay


def best_locations(
    tiles: TileMap,
    district: str,
    civ_id: Optional[str] = None,
    limit: Optional[int] = 5,
    min_bonus: int = 0,
) -> List[Placement]:
    """Highest-scoring placements for ``district``.

    Ties are ordered by coordinate so repeated runs agree.
    """
    placements = [
        Placement(coord=tiles[key].coord, result=result)
        for key, result in adjacency_overlay(tiles, district, civ_id).items()
        if result.bonus >= min_bonus
    ]
    placements.sort(key=lambda p: (-p.bonus, p.coord))
    if limit is not None:
        placements = placements[: max(limit, 0)]
    return placements


def suggest_districts(
    coord: HexCoord,
    tiles: TileMap,
    civ_id: Optional[str] = None,
) -> List[AdjacencyResult]:
    """Districts worth showing for one tile.

    Every positive result when there are at least three of them, otherwise
    the five best regardless of bonus.
    """
    results = calculate_all_adjacencies(coord, tiles, civ_id)
    positive = [r for r in results if r.bonus > 0]
    if len(positive) >= 3:
        return positive
    return results[:5]


__all__ = [
    "OVERLAY_DISTRICTS",
    "Placement",
    "adjacency_overlay",
    "best_locations",
    "suggest_districts",
]
