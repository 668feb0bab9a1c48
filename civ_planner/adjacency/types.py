"""Result types produced by the adjacency engine."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class AdjacencySource:
    """A named contributor to an adjacency bonus.

    ``total_bonus`` is ``count * bonus_per_source``; fractional values are
    only truncated once, when a result sums its sources.
    """

    source: str
    count: int
    bonus_per_source: float

    @property
    def total_bonus(self) -> float:
        return self.count * self.bonus_per_source

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "count": self.count,
            "bonus_per_source": self.bonus_per_source,
            "total_bonus": self.total_bonus,
        }


def make_source(source: str, count: int, bonus_per_source: float) -> Optional[AdjacencySource]:
    """Build a source, or None when nothing qualified."""
    if count == 0:
        return None
    return AdjacencySource(source=source, count=count, bonus_per_source=bonus_per_source)


def floor_total(sources: List[AdjacencySource]) -> int:
    return int(math.floor(sum(s.total_bonus for s in sources)))


@dataclass(frozen=True)
class AdjacencyResult:
    district: str
    bonus: int
    breakdown: List[AdjacencySource] = field(default_factory=list)

    @classmethod
    def from_sources(cls, district: str, sources: List[AdjacencySource]) -> "AdjacencyResult":
        return cls(district=district, bonus=floor_total(sources), breakdown=list(sources))

    def source(self, name: str) -> Optional[AdjacencySource]:
        for entry in self.breakdown:
            if entry.source == name:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "district": self.district,
            "bonus": self.bonus,
            "breakdown": [s.to_dict() for s in self.breakdown],
        }


__all__ = ["AdjacencyResult", "AdjacencySource", "floor_total", "make_source"]
