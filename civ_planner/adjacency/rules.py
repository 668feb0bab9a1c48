"""District adjacency rule table.

Every district maps to a :class:`DistrictRule`: a pure function from the
neighboring tiles (plus the district's own tile, for the few rules that
read it) to a list of :class:`AdjacencySource`, and two flags controlling
the generic steps the calculator runs afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..map.tiles import DISTRICT_TYPES, Tile
from .types import AdjacencySource, make_source

INFRASTRUCTURE_DISTRICTS: tuple[str, ...] = ("aqueduct", "dam", "canal")

# City Center and every built district except infrastructure
ADJACENCY_PROVIDING_DISTRICTS: tuple[str, ...] = tuple(
    d for d in DISTRICT_TYPES if d not in INFRASTRUCTURE_DISTRICTS
)

WATER_DISTRICTS: tuple[str, ...] = ("harbor", "water_park")

DISTRICT_DISPLAY_NAMES: Dict[str, str] = {
    "city_center": "City Center",
    "campus": "Campus",
    "holy_site": "Holy Site",
    "theater_square": "Theater Square",
    "commercial_hub": "Commercial Hub",
    "harbor": "Harbor",
    "industrial_zone": "Industrial Zone",
    "encampment": "Encampment",
    "entertainment_complex": "Entertainment Complex",
    "water_park": "Water Park",
    "aerodrome": "Aerodrome",
    "spaceport": "Spaceport",
    "government_plaza": "Government Plaza",
    "diplomatic_quarter": "Diplomatic Quarter",
    "neighborhood": "Neighborhood",
    "aqueduct": "Aqueduct",
    "dam": "Dam",
    "canal": "Canal",
    "preserve": "Preserve",
}

SourceRule = Callable[[Sequence[Tile], Optional[Tile]], List[AdjacencySource]]
TilePredicate = Callable[[Tile], bool]


def count_matching(neighbors: Sequence[Tile], predicate: TilePredicate) -> int:
    return sum(1 for tile in neighbors if predicate(tile))


def provides_adjacency(tile: Tile) -> bool:
    return tile.district is not None and tile.district in ADJACENCY_PROVIDING_DISTRICTS


def _collect(*candidates: Optional[AdjacencySource]) -> List[AdjacencySource]:
    return [c for c in candidates if c is not None]


def _counted(neighbors: Sequence[Tile], source: str, bonus: float, predicate: TilePredicate) -> Optional[AdjacencySource]:
    return make_source(source, count_matching(neighbors, predicate), bonus)


# ---------------------------------------------------------------------------
# Per-district rules
# ---------------------------------------------------------------------------

def campus_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return _collect(
        _counted(neighbors, "Mountain", 1, lambda t: t.is_mountain),
        _counted(neighbors, "Rainforest", 1, lambda t: t.has_feature("rainforest")),
        _counted(neighbors, "Reef", 1, lambda t: t.has_feature("reef")),
        _counted(neighbors, "Geothermal Fissure", 1, lambda t: t.has_feature("geothermal")),
    )


def holy_site_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return _collect(
        _counted(neighbors, "Mountain", 1, lambda t: t.is_mountain),
        _counted(neighbors, "Woods", 1, lambda t: t.has_feature("woods")),
    )


def theater_square_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return _collect(
        _counted(neighbors, "Wonder", 1, lambda t: t.wonder is not None),
        _counted(
            neighbors,
            "Entertainment Complex / Water Park",
            2,
            lambda t: t.district in ("entertainment_complex", "water_park"),
        ),
    )


def commercial_hub_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    # The river bonus reads the hub's own tile, once, rather than counting
    # neighbors like every other rule.
    river = make_source("River", 1, 2) if center is not None and center.has_river() else None
    return _collect(
        _counted(neighbors, "Harbor", 2, lambda t: t.district == "harbor"),
        river,
    )


def industrial_zone_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return _collect(
        _counted(
            neighbors,
            "Aqueduct / Dam / Canal",
            2,
            lambda t: t.district in INFRASTRUCTURE_DISTRICTS,
        ),
        _counted(neighbors, "Mine", 1, lambda t: t.improvement == "mine"),
        _counted(neighbors, "Quarry", 1, lambda t: t.improvement == "quarry"),
        _counted(
            neighbors,
            "Strategic Resource (improved)",
            2,
            lambda t: t.resource is not None
            and t.resource.type == "strategic"
            and t.improvement is not None,
        ),
        _counted(neighbors, "Lumber Mill", 0.5, lambda t: t.improvement == "lumber_mill"),
    )


def harbor_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return _collect(
        _counted(neighbors, "City Center", 2, lambda t: t.district == "city_center"),
        _counted(neighbors, "Sea Resource", 1, lambda t: t.is_water and t.resource is not None),
        _counted(
            neighbors,
            "District",
            1,
            lambda t: provides_adjacency(t) and t.district != "city_center",
        ),
    )


def _is_charming(tile: Tile) -> bool:
    return (
        tile.has_feature("woods")
        or tile.is_mountain
        or tile.terrain == "coast"
        or tile.has_feature("oasis")
    )


def preserve_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return _collect(
        _counted(
            neighbors,
            "Unimproved Charming Tile",
            1,
            lambda t: t.improvement is None and t.district is None and _is_charming(t),
        ),
    )


def no_sources(neighbors: Sequence[Tile], center: Optional[Tile] = None) -> List[AdjacencySource]:
    return []


@dataclass(frozen=True)
class DistrictRule:
    """How one district type is scored.

    ``standalone`` rules return their own sources as the final breakdown:
    no civilization extras, no generic district bonus, no Government Plaza
    bonus. Otherwise ``receives_district_bonus`` decides whether the generic
    per-district source is added.
    """

    sources: SourceRule = no_sources
    receives_district_bonus: bool = True
    standalone: bool = False


GENERIC_RULE = DistrictRule()

DISTRICT_RULES: Dict[str, DistrictRule] = {
    "campus": DistrictRule(sources=campus_sources),
    "holy_site": DistrictRule(sources=holy_site_sources),
    "theater_square": DistrictRule(sources=theater_square_sources),
    "commercial_hub": DistrictRule(sources=commercial_hub_sources),
    "industrial_zone": DistrictRule(sources=industrial_zone_sources),
    "harbor": DistrictRule(sources=harbor_sources, receives_district_bonus=False, standalone=True),
    "encampment": GENERIC_RULE,
    "preserve": DistrictRule(sources=preserve_sources),
    "government_plaza": DistrictRule(receives_district_bonus=False, standalone=True),
    "city_center": DistrictRule(receives_district_bonus=False),
    "aqueduct": DistrictRule(receives_district_bonus=False),
    "dam": DistrictRule(receives_district_bonus=False),
    "canal": DistrictRule(receives_district_bonus=False),
}


def rule_for(district: str) -> DistrictRule:
    """Rule for ``district``; unlisted districts only get the generic steps."""
    return DISTRICT_RULES.get(district, GENERIC_RULE)


# ---------------------------------------------------------------------------
# Data-driven predicates for civilization extra sources
# ---------------------------------------------------------------------------

def _one_of(value: Any, expected: Any) -> bool:
    if isinstance(expected, (list, tuple, set)):
        return value in expected
    return value == expected


def tile_matches(tile: Tile, match: Mapping[str, Any]) -> bool:
    """Whether ``tile`` satisfies every condition in ``match``.

    Unknown condition keys never match, so a typo in the modifier table
    cannot silently grant a bonus.
    """
    for key, expected in match.items():
        if key == "district":
            ok = _one_of(tile.district, expected)
        elif key == "improvement":
            ok = _one_of(tile.improvement, expected)
        elif key == "terrain":
            ok = _one_of(tile.terrain, expected)
        elif key == "modifier":
            ok = _one_of(tile.modifier, expected)
        elif key == "feature":
            wanted = expected if isinstance(expected, (list, tuple, set)) else [expected]
            ok = any(tile.has_feature(f) for f in wanted)
        elif key == "resource_type":
            ok = tile.resource is not None and _one_of(tile.resource.type, expected)
        elif key == "has_resource":
            ok = (tile.resource is not None) == bool(expected)
        else:
            ok = False
        if not ok:
            return False
    return True


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

def is_water_district(district: str) -> bool:
    return district in WATER_DISTRICTS


def district_display_name(district: str) -> str:
    return DISTRICT_DISPLAY_NAMES.get(district, district)


def can_place_district(tile: Optional[Tile], district: str) -> bool:
    """Whether ``district`` could be built on ``tile``.

    Mountains and occupied tiles (district or wonder) are never valid;
    water tiles only accept water districts, and water districts need water.
    """
    if tile is None:
        return False
    if tile.is_mountain or tile.district is not None or tile.wonder is not None:
        return False
    return tile.is_water == is_water_district(district)


__all__ = [
    "ADJACENCY_PROVIDING_DISTRICTS",
    "DISTRICT_DISPLAY_NAMES",
    "DISTRICT_RULES",
    "DistrictRule",
    "GENERIC_RULE",
    "INFRASTRUCTURE_DISTRICTS",
    "WATER_DISTRICTS",
    "campus_sources",
    "can_place_district",
    "commercial_hub_sources",
    "count_matching",
    "district_display_name",
    "harbor_sources",
    "holy_site_sources",
    "industrial_zone_sources",
    "is_water_district",
    "preserve_sources",
    "provides_adjacency",
    "rule_for",
    "theater_square_sources",
    "tile_matches",
]
