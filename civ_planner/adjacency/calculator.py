"""District adjacency bonus calculator.

Scores a prospective district placement from the six neighboring tiles.
Neighbors missing from the tile map (off-map or unexplored) are left out
of every count: they neither grant nor cost anything.

Order of evaluation for a district:
    1. the district's own rule (see :mod:`civ_planner.adjacency.rules`);
       standalone rules (Harbor, Government Plaza) stop here
    2. civilization extra sources for the district, then feature bonuses
    3. the generic per-district source, scaled by the civilization's
       district multiplier
    4. the Government Plaza source, which stacks with step 3
The bonus is the floor of the summed source totals.
"""
from __future__ import annotations

from typing import List, Optional

import structlog

from ..civ_data import CivModifiers, get_civ_modifiers
from ..map.coordinates import HexCoord, hex_neighbors
from ..map.tiles import DISTRICT_TYPES, FEATURES, Tile, TileMap, get_tile
from .rules import (
    count_matching,
    provides_adjacency,
    rule_for,
    tile_matches,
)
from .types import AdjacencyResult, AdjacencySource, make_source

logger = structlog.get_logger(__name__)

# Specialty districts scored for a tile suggestion
SUGGESTED_DISTRICTS: tuple[str, ...] = (
    "campus",
    "holy_site",
    "theater_square",
    "commercial_hub",
    "industrial_zone",
    "harbor",
    "encampment",
    "entertainment_complex",
    "preserve",
)

GOVERNMENT_PLAZA_BONUS = 1


def neighbor_tiles(coord: HexCoord, tiles: TileMap) -> List[Tile]:
    """Tiles around ``coord`` in edge order, skipping those not in ``tiles``."""
    found: List[Tile] = []
    for neighbor in hex_neighbors(coord):
        tile = get_tile(tiles, neighbor)
        if isinstance(tile, Tile):
            found.append(tile)
        elif tile is not None:
            logger.warning("invalid_tile_entry_skipped", coord=neighbor.key, kind=type(tile).__name__)
    return found


def civ_extra_sources(
    district: str, neighbors: List[Tile], modifiers: CivModifiers
) -> List[AdjacencySource]:
    """Labelled sources a civilization adds on top of the base rule."""
    sources: List[AdjacencySource] = []
    custom = modifiers.custom_rules(district)
    if custom is not None:
        for extra in custom.extra_sources:
            count = count_matching(neighbors, lambda t, m=extra.match: tile_matches(t, m))
            entry = make_source(extra.source, count, extra.bonus_per_source)
            if entry is not None:
                sources.append(entry)
    for feature in FEATURES:
        bonus = modifiers.feature_bonus(feature, district)
        if not bonus:
            continue
        count = count_matching(neighbors, lambda t, f=feature: t.has_feature(f))
        label = f"{feature.replace('_', ' ').title()} ({modifiers.name})"
        entry = make_source(label, count, bonus)
        if entry is not None:
            sources.append(entry)
    return sources


def district_bonus_source(neighbors: List[Tile], multiplier: float) -> Optional[AdjacencySource]:
    return make_source("District", count_matching(neighbors, provides_adjacency), multiplier)


def government_plaza_source(neighbors: List[Tile]) -> Optional[AdjacencySource]:
    count = count_matching(neighbors, lambda t: t.district == "government_plaza")
    return make_source("Government Plaza", count, GOVERNMENT_PLAZA_BONUS)


def calculate_adjacency(
    coord: HexCoord,
    district: str,
    tiles: TileMap,
    civ_id: Optional[str] = None,
) -> AdjacencyResult:
    """Adjacency bonus for placing ``district`` at ``coord``.

    Args:
        coord: Tile the district would occupy
        district: District type, e.g. ``"campus"``
        tiles: Map snapshot keyed by ``coord_key``
        civ_id: Optional civilization id (case-insensitive)

    Returns:
        AdjacencyResult with the floored bonus and the source breakdown
    """
    neighbors = neighbor_tiles(coord, tiles)
    center = get_tile(tiles, coord)
    modifiers = get_civ_modifiers(civ_id)
    rule = rule_for(district)
    if district not in DISTRICT_TYPES:
        logger.debug("adjacency_unknown_district", district=district)

    sources = list(rule.sources(neighbors, center))
    if rule.standalone:
        return AdjacencyResult.from_sources(district, sources)

    sources.extend(civ_extra_sources(district, neighbors, modifiers))

    if rule.receives_district_bonus:
        generic = district_bonus_source(neighbors, modifiers.district_bonus_multiplier)
        if generic is not None:
            sources.append(generic)

    plaza = government_plaza_source(neighbors)
    if plaza is not None:
        sources.append(plaza)

    return AdjacencyResult.from_sources(district, sources)


def calculate_all_adjacencies(
    coord: HexCoord,
    tiles: TileMap,
    civ_id: Optional[str] = None,
) -> List[AdjacencyResult]:
    """Score every suggested district at ``coord``, best first.

    The sort is stable, so equal bonuses keep ``SUGGESTED_DISTRICTS`` order.
    """
    results = [calculate_adjacency(coord, d, tiles, civ_id) for d in SUGGESTED_DISTRICTS]
    return sorted(results, key=lambda r: r.bonus, reverse=True)


def with_policy_multiplier(result: AdjacencyResult, factor: float) -> AdjacencyResult:
    """Apply a policy card that multiplies a district's adjacency yield.

    The boost is recorded as its own source so the breakdown still sums to
    the bonus.
    """
    if factor == 1 or result.bonus <= 0:
        return result
    label = f"Policy (x{factor:g})"
    boost = AdjacencySource(source=label, count=1, bonus_per_source=result.bonus * (factor - 1))
    return AdjacencyResult.from_sources(result.district, list(result.breakdown) + [boost])


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

ADJACENCY_TIERS: tuple[tuple[int, str, str], ...] = (
    # (upper bound inclusive, rating, color)
    (0, "Poor", "#6b7280"),
    (2, "Decent", "#eab308"),
    (4, "Good", "#f97316"),
)
EXCELLENT = ("Excellent", "#22c55e")


def _tier(bonus: float) -> tuple[str, str]:
    for upper, rating, color in ADJACENCY_TIERS:
        if bonus <= upper:
            return rating, color
    return EXCELLENT


def adjacency_color_for_bonus(bonus: float) -> str:
    """Map color for a bonus: gray, yellow, orange or green."""
    return _tier(bonus)[1]


def adjacency_rating(bonus: float) -> str:
    """Poor / Decent / Good / Excellent label for a bonus."""
    return _tier(bonus)[0]


__all__ = [
    "ADJACENCY_TIERS",
    "GOVERNMENT_PLAZA_BONUS",
    "SUGGESTED_DISTRICTS",
    "adjacency_color_for_bonus",
    "adjacency_rating",
    "calculate_adjacency",
    "calculate_all_adjacencies",
    "civ_extra_sources",
    "district_bonus_source",
    "government_plaza_source",
    "neighbor_tiles",
    "with_policy_multiplier",
]
