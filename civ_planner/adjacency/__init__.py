"""District adjacency scoring."""

from .calculator import (
    adjacency_color_for_bonus,
    adjacency_rating,
    calculate_adjacency,
    calculate_all_adjacencies,
    with_policy_multiplier,
)
from .overlay import adjacency_overlay, best_locations, suggest_districts
from .rules import can_place_district, district_display_name, is_water_district
from .types import AdjacencyResult, AdjacencySource

__all__ = [
    "AdjacencyResult",
    "AdjacencySource",
    "adjacency_color_for_bonus",
    "adjacency_overlay",
    "adjacency_rating",
    "best_locations",
    "calculate_adjacency",
    "calculate_all_adjacencies",
    "can_place_district",
    "district_display_name",
    "is_water_district",
    "suggest_districts",
    "with_policy_multiplier",
]
