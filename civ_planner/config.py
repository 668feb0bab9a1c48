from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
import json, os

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "civ": None,
    "overlay": {"limit": 5, "min_bonus": 0},
    "logging": {"level": "warning"},
}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    # YAML is a superset of JSON; fall back to json for its error message
    try:
        d = yaml.safe_load(text)
    except yaml.YAMLError:
        d = json.loads(text)
    if not isinstance(d, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = "CIV_PLANNER__") -> Dict[str, Any]:
    # Nested via double underscores: CIV_PLANNER__OVERLAY__LIMIT=10
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})

def resolve_config(paths: Iterable[str] | None = None, env_prefix: Optional[str] = "CIV_PLANNER__") -> Dict[str, Any]:
    """Defaults, then config files in order, then environment overrides."""
    cfg = _deep_merge(DEFAULT_CONFIG, load_configs(paths))
    if env_prefix:
        cfg = apply_cli_overrides(cfg, env_overrides(env_prefix))
    return cfg

__all__ = ["DEFAULT_CONFIG", "load_configs", "env_overrides", "apply_cli_overrides", "resolve_config", "_deep_merge"]
