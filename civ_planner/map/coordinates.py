"""Axial coordinate system for the planner's hex map.

This module implements the flat-topped hexagonal grid used by the map view
and by every adjacency calculation.

Coordinate System:
    - Axial coordinates (q, r); the third cube coordinate s = -q - r is only
      needed when rounding fractional positions
    - Pixel origin at hex (0, 0)
    - Flat-top hexes of radius ``HEX_SIZE`` (center to corner)

Edge Numbering (clockwise from East):
    0 = East     : (+1,  0)
    1 = Northeast: (+1, -1)
    2 = Northwest: ( 0, -1)
    3 = West     : (-1,  0)
    4 = Southwest: (-1, +1)
    5 = Southeast: ( 0, +1)

River edges on a tile are indexed with the same numbering, so the order of
``hex_neighbors`` is part of the public contract.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# Distance from hex center to corner, in pixels
HEX_SIZE: float = 40

# Flat-top hex dimensions
HEX_WIDTH: float = HEX_SIZE * 2
HEX_HEIGHT: float = math.sqrt(3) * HEX_SIZE

# Spacing between neighboring hex centers
HEX_HORIZ_SPACING: float = HEX_WIDTH * 0.75
HEX_VERT_SPACING: float = HEX_HEIGHT

AXIAL_DIRECTIONS: List[Tuple[int, int]] = [
    (+1,  0),  # 0: East
    (+1, -1),  # 1: Northeast
    ( 0, -1),  # 2: Northwest
    (-1,  0),  # 3: West
    (-1, +1),  # 4: Southwest
    ( 0, +1),  # 5: Southeast
]

EDGE_NAMES: Tuple[str, ...] = ("E", "NE", "NW", "W", "SW", "SE")


@dataclass(frozen=True, order=True)
class HexCoord:
    """A single hex cell in axial coordinates."""

    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    @property
    def key(self) -> str:
        return coord_key(self)

    def __str__(self) -> str:
        return self.key


def coord_key(coord: HexCoord) -> str:
    """Canonical ``"q,r"`` string used to key tile maps."""
    return f"{coord.q},{coord.r}"


def parse_coord_key(key: str) -> HexCoord:
    """Inverse of :func:`coord_key`.

    Raises:
        ValueError: If ``key`` is not two comma-separated integers
    """
    parts = str(key).split(",")
    if len(parts) != 2:
        raise ValueError(f"Malformed coordinate key: {key!r}")
    try:
        return HexCoord(int(parts[0].strip()), int(parts[1].strip()))
    except ValueError as exc:
        raise ValueError(f"Malformed coordinate key: {key!r}") from exc


def axial_to_pixel(coord: HexCoord, size: float = HEX_SIZE) -> Tuple[float, float]:
    """Center of ``coord`` in pixel space (flat-top orientation).

    Returns:
        ``(x, y)`` pixel position
    """
    x = size * (3 / 2) * coord.q
    y = size * (math.sqrt(3) / 2 * coord.q + math.sqrt(3) * coord.r)
    return (x, y)


def pixel_to_axial(x: float, y: float, size: float = HEX_SIZE) -> HexCoord:
    """Hex containing the pixel ``(x, y)``."""
    q = (2 / 3 * x) / size
    r = (-1 / 3 * x + math.sqrt(3) / 3 * y) / size
    return round_axial(q, r)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_axial(q: float, r: float) -> HexCoord:
    """Round fractional axial coordinates to the nearest hex.

    Each cube coordinate is rounded independently; the one with the largest
    rounding error is then recomputed from the other two so that
    q + r + s == 0 still holds.
    """
    s = -q - r

    rq = _round_half_up(q)
    rr = _round_half_up(r)
    rs = _round_half_up(s)

    q_diff = abs(rq - q)
    r_diff = abs(rr - r)
    s_diff = abs(rs - s)

    if q_diff > r_diff and q_diff > s_diff:
        rq = -rr - rs
    elif r_diff > s_diff:
        rr = -rq - rs

    return HexCoord(rq, rr)


def hex_corners(center: Tuple[float, float], size: float = HEX_SIZE) -> List[Tuple[float, float]]:
    """The six polygon corners around a pixel center.

    Corners start at 0 degrees and advance by 60 degrees, which is clockwise
    on screen since the y axis points down.
    """
    cx, cy = center
    corners: List[Tuple[float, float]] = []
    for i in range(6):
        angle_rad = math.radians(60 * i)
        corners.append((cx + size * math.cos(angle_rad), cy + size * math.sin(angle_rad)))
    return corners


def axial_add(coord: HexCoord, direction: int) -> HexCoord:
    """Step one hex from ``coord`` along edge ``direction`` (0-5)."""
    dq, dr = AXIAL_DIRECTIONS[direction % 6]
    return HexCoord(coord.q + dq, coord.r + dr)


def hex_neighbors(coord: HexCoord) -> List[HexCoord]:
    """The six neighbors of ``coord`` in E, NE, NW, W, SW, SE order."""
    return [axial_add(coord, edge) for edge in range(6)]


def axial_neighbors(coord: HexCoord) -> Dict[int, HexCoord]:
    """Neighbors of ``coord`` keyed by edge index."""
    return {edge: axial_add(coord, edge) for edge in range(6)}


def opposite_edge(edge: int) -> int:
    """Edge 0 (East) is opposite edge 3 (West), etc."""
    return (edge + 3) % 6


def direction_between_coords(a: HexCoord, b: HexCoord) -> Optional[int]:
    """Edge index leading from ``a`` to ``b``, or None if they are not adjacent."""
    delta = (b.q - a.q, b.r - a.r)
    for edge, step in enumerate(AXIAL_DIRECTIONS):
        if delta == step:
            return edge
    return None


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Number of steps between two hexes."""
    dq = a.q - b.q
    dr = a.r - b.r
    return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


def hexes_in_range(center: HexCoord, radius: int) -> List[HexCoord]:
    """Every hex within ``radius`` steps of ``center``, center included.

    A negative radius yields no hexes; otherwise the result holds
    ``1 + 3 * radius * (radius + 1)`` coordinates.
    """
    results: List[HexCoord] = []
    for dq in range(-radius, radius + 1):
        for dr in range(max(-radius, -dq - radius), min(radius, -dq + radius) + 1):
            results.append(HexCoord(center.q + dq, center.r + dr))
    return results


def hex_ring(center: HexCoord, radius: int) -> List[HexCoord]:
    """Hexes exactly ``radius`` steps from ``center``."""
    if radius <= 0:
        return [center] if radius == 0 else []
    return [c for c in hexes_in_range(center, radius) if hex_distance(center, c) == radius]


__all__ = [
    "AXIAL_DIRECTIONS",
    "EDGE_NAMES",
    "HEX_HEIGHT",
    "HEX_HORIZ_SPACING",
    "HEX_SIZE",
    "HEX_VERT_SPACING",
    "HEX_WIDTH",
    "HexCoord",
    "axial_add",
    "axial_neighbors",
    "axial_to_pixel",
    "coord_key",
    "direction_between_coords",
    "hex_corners",
    "hex_distance",
    "hex_neighbors",
    "hex_ring",
    "hexes_in_range",
    "opposite_edge",
    "parse_coord_key",
    "pixel_to_axial",
    "round_axial",
]
