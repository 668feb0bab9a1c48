"""Civ planner: hex map geometry and district adjacency scoring."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "HexCoord",
    "Tile",
    "Resource",
    "coord_key",
    "parse_coord_key",
    "tile_map",
    "AdjacencyResult",
    "AdjacencySource",
    "calculate_adjacency",
    "calculate_all_adjacencies",
    "adjacency_color_for_bonus",
    "adjacency_rating",
    "with_policy_multiplier",
    "best_locations",
    "suggest_districts",
    "load_tile_map",
    "CivModifiers",
    "get_civ_modifiers",
    "all_civs",
    "get_registry",
    "__version__",
]

_EXPORTS = {
    "HexCoord": ("map.coordinates", "HexCoord"),
    "Tile": ("map.tiles", "Tile"),
    "Resource": ("map.tiles", "Resource"),
    "coord_key": ("map.coordinates", "coord_key"),
    "parse_coord_key": ("map.coordinates", "parse_coord_key"),
    "tile_map": ("map.tiles", "tile_map"),
    "AdjacencyResult": ("adjacency.types", "AdjacencyResult"),
    "AdjacencySource": ("adjacency.types", "AdjacencySource"),
    "calculate_adjacency": ("adjacency.calculator", "calculate_adjacency"),
    "calculate_all_adjacencies": ("adjacency.calculator", "calculate_all_adjacencies"),
    "adjacency_color_for_bonus": ("adjacency.calculator", "adjacency_color_for_bonus"),
    "adjacency_rating": ("adjacency.calculator", "adjacency_rating"),
    "with_policy_multiplier": ("adjacency.calculator", "with_policy_multiplier"),
    "best_locations": ("adjacency.overlay", "best_locations"),
    "suggest_districts": ("adjacency.overlay", "suggest_districts"),
    "load_tile_map": ("state.loaders", "load_tile_map"),
    "CivModifiers": ("civ_data", "CivModifiers"),
    "get_civ_modifiers": ("civ_data", "get_civ_modifiers"),
    "all_civs": ("civ_data", "all_civs"),
    "get_registry": ("civ_data", "get_registry"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
