"""Utilities for loading civilization adjacency modifiers."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import structlog
import yaml

logger = structlog.get_logger(__name__)

DEFAULT_DISTRICT_BONUS = 0.5


@dataclass(frozen=True)
class ExtraSource:
    """One additional adjacency source granted by a civilization."""

    source: str
    match: Mapping[str, Any]
    bonus_per_source: float


@dataclass(frozen=True)
class CustomDistrictRules:
    extra_sources: Tuple[ExtraSource, ...] = tuple()
    replaces: Optional[str] = None
    unique_district: Optional[str] = None


@dataclass(frozen=True)
class CivModifiers:
    """Immutable adjacency modifier record for one civilization."""

    civ_id: str
    name: str
    district_bonus_multiplier: float = DEFAULT_DISTRICT_BONUS
    feature_bonuses: Mapping[str, float] = field(default_factory=dict)
    custom_districts: Mapping[str, CustomDistrictRules] = field(default_factory=dict)
    notes: Tuple[str, ...] = tuple()

    def feature_bonus(self, feature: str, district: str) -> float:
        return float(self.feature_bonuses.get(f"{feature}_{district}", 0))

    def custom_rules(self, district: str) -> Optional[CustomDistrictRules]:
        return self.custom_districts.get(district)


DEFAULT_MODIFIERS = CivModifiers(civ_id="default", name="Default")


def _parse_extra_source(civ_id: str, district: str, block: Mapping[str, Any]) -> ExtraSource:
    try:
        return ExtraSource(
            source=str(block["source"]),
            match=dict(block.get("match") or {}),
            bonus_per_source=float(block["bonus_per_source"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid extra source for '{civ_id}' / '{district}': {block!r}") from exc


def _parse_civ(civ_id: str, block: Mapping[str, Any]) -> CivModifiers:
    customs: Dict[str, CustomDistrictRules] = {}
    for district, rules in (block.get("custom_districts") or {}).items():
        rules = rules or {}
        extras = tuple(
            _parse_extra_source(civ_id, district, extra)
            for extra in (rules.get("extra_sources") or [])
        )
        customs[district] = CustomDistrictRules(
            extra_sources=extras,
            replaces=rules.get("replaces"),
            unique_district=rules.get("unique_district"),
        )
    return CivModifiers(
        civ_id=civ_id,
        name=block.get("name", civ_id.title()),
        district_bonus_multiplier=float(
            block.get("district_bonus_multiplier", DEFAULT_DISTRICT_BONUS)
        ),
        feature_bonuses={k: float(v) for k, v in (block.get("feature_bonuses") or {}).items()},
        custom_districts=customs,
        notes=tuple(block.get("notes") or ()),
    )


class CivRegistry:
    """Lazily loaded, read-only table of civilization modifiers."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path or os.path.join(os.path.dirname(__file__), "data", "civ_modifiers.yaml")
        self._data: Dict[str, CivModifiers] = {}
        self._meta: Dict[str, Any] = {}
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        with open(self._path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Civilization table at {self._path} must be a mapping")
        self._meta = payload.get("_meta", {}) or {}
        for civ_id, block in payload.items():
            if str(civ_id).startswith("_"):
                continue
            key = str(civ_id).lower()
            self._data[key] = _parse_civ(key, block or {})
        self._loaded = True
        logger.debug("civ_registry_loaded", path=self._path, civs=len(self._data))

    @property
    def meta(self) -> Dict[str, Any]:
        self.load()
        return self._meta

    def get(self, civ_id: Optional[str]) -> CivModifiers:
        """Modifiers for ``civ_id``; unknown or empty ids get the defaults."""
        if not civ_id:
            return DEFAULT_MODIFIERS
        self.load()
        found = self._data.get(civ_id.strip().lower())
        if found is None:
            logger.debug("civ_modifiers_default", civ_id=civ_id)
            return DEFAULT_MODIFIERS
        return found

    def require(self, civ_id: str) -> CivModifiers:
        self.load()
        try:
            return self._data[civ_id.strip().lower()]
        except KeyError as exc:
            available = ", ".join(sorted(self._data))
            raise KeyError(f"Unknown civilization '{civ_id}'. Available: {available}") from exc

    def all_civs(self) -> Dict[str, CivModifiers]:
        self.load()
        return dict(self._data)


_registry: Optional[CivRegistry] = None


def get_registry(path: Optional[str] = None) -> CivRegistry:
    global _registry
    if _registry is None or path is not None:
        _registry = CivRegistry(path=path)
    return _registry


def get_civ_modifiers(civ_id: Optional[str] = None) -> CivModifiers:
    return get_registry().get(civ_id)


def all_civs() -> Dict[str, CivModifiers]:
    return get_registry().all_civs()


__all__ = [
    "CivModifiers",
    "CivRegistry",
    "CustomDistrictRules",
    "DEFAULT_DISTRICT_BONUS",
    "DEFAULT_MODIFIERS",
    "ExtraSource",
    "all_civs",
    "get_civ_modifiers",
    "get_registry",
]
