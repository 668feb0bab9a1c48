from __future__ import annotations
import argparse, json, logging, sys
from typing import Any, Dict, List, Optional

import structlog

from .config import resolve_config
from .map.coordinates import parse_coord_key
from .map.tiles import DISTRICT_TYPES
from .state.loaders import load_tile_map
from .adjacency.calculator import (
    adjacency_rating,
    calculate_adjacency,
    with_policy_multiplier,
)
from .adjacency.overlay import OVERLAY_DISTRICTS, best_locations, suggest_districts
from .adjacency.rules import district_display_name
from .adjacency.types import AdjacencyResult

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "warning") -> None:
    """Route structlog output to stderr, dropping events below ``level``."""
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="civ-planner",
        description="District adjacency planner"
    )
    sub = p.add_subparsers(dest="cmd")

    # adjacency
    adj = sub.add_parser("adjacency", help="Score one district at one tile")
    _add_common_args(adj)
    adj.add_argument("--at", required=True, help="Tile coordinate as Q,R")
    adj.add_argument("--district", required=True, choices=DISTRICT_TYPES)
    adj.add_argument("--policy-multiplier", dest="policy_multiplier", type=float, default=1.0,
                     help="Multiply the result, e.g. 2 for a doubling policy card")

    # suggest
    sg = sub.add_parser("suggest", help="Rank districts for one tile")
    _add_common_args(sg)
    sg.add_argument("--at", required=True, help="Tile coordinate as Q,R")

    # overlay
    ov = sub.add_parser("overlay", help="Best tiles on the map for a district")
    _add_common_args(ov)
    ov.add_argument("--district", required=True, choices=OVERLAY_DISTRICTS)
    ov.add_argument("--limit", type=int, default=None)
    ov.add_argument("--min-bonus", dest="min_bonus", type=int, default=None)

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--map", dest="map_path", required=True, help="Map snapshot (.json or .yaml)")
    ap.add_argument("--civ", type=str, default=None, help="Civilization id, e.g. japan")
    ap.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    ap.add_argument("--env-prefix", type=str, default="CIV_PLANNER__", help="Env prefix for overrides")
    ap.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    ap.add_argument("--log-level", dest="log_level", type=str, default=None)


def _format_result(result: AdjacencyResult, heading: Optional[str] = None) -> List[str]:
    name = district_display_name(result.district)
    lines = [f"{heading or name}: +{result.bonus} ({adjacency_rating(result.bonus)})"]
    for src in result.breakdown:
        lines.append(f"    {src.source:<36} {src.count} x {src.bonus_per_source:g} = {src.total_bonus:g}")
    return lines


def _run(args: argparse.Namespace, cfg: Dict[str, Any]) -> Any:
    tiles = load_tile_map(args.map_path)
    civ = args.civ or cfg.get("civ")

    if args.cmd == "adjacency":
        coord = parse_coord_key(args.at)
        result = calculate_adjacency(coord, args.district, tiles, civ)
        result = with_policy_multiplier(result, args.policy_multiplier)
        if args.json:
            return result.to_dict()
        return _format_result(result, heading=f"{district_display_name(result.district)} at {coord.key}")

    if args.cmd == "suggest":
        coord = parse_coord_key(args.at)
        results = suggest_districts(coord, tiles, civ)
        if args.json:
            return [r.to_dict() for r in results]
        lines: List[str] = [f"Suggestions for {coord.key}"]
        for r in results:
            lines.extend(_format_result(r))
        return lines

    overlay_cfg = cfg.get("overlay") or {}
    limit = args.limit if args.limit is not None else overlay_cfg.get("limit")
    min_bonus = args.min_bonus if args.min_bonus is not None else overlay_cfg.get("min_bonus", 0)
    placements = best_locations(tiles, args.district, civ, limit=limit, min_bonus=int(min_bonus or 0))
    if args.json:
        return [p.to_dict() for p in placements]
    lines = [f"Best {district_display_name(args.district)} locations"]
    for p in placements:
        lines.extend(_format_result(p.result, heading=f"  {p.coord.key}"))
    return lines


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        cfg = resolve_config(args.config, args.env_prefix)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    configure_logging(args.log_level or (cfg.get("logging") or {}).get("level", "warning"))

    try:
        out = _run(args, cfg)
    except (OSError, ValueError) as exc:
        logger.error("command_failed", cmd=args.cmd, error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(out, indent=2))
    else:
        print("\n".join(out))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
