from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List

import yaml  # type: ignore[import-untyped]

from .foundation.config import STATUS_SECTION, StatusConfig, find_config_file, load_config
from .status import (
    ConditionStatus,
    ParentReference,
    PolicyStatus,
    set_condition_for_policy_ancestor,
    truncate_policy_ancestors,
)

logger = logging.getLogger(__name__)


def _load_status(path: Path) -> PolicyStatus:
    if not path.exists():
        return PolicyStatus()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError(f"{path}: status document must be a mapping")
    return PolicyStatus.from_payload(data)


def _emit(status: PolicyStatus, path: Path, write: bool) -> None:
    payload = json.dumps(status.to_payload(), indent=2)
    if write:
        path.write_text(payload + "\n", encoding="utf-8")
        logger.info("wrote %d ancestor(s) to %s", len(status.ancestors), path)
    print(payload)


def _resolve_config(args: argparse.Namespace) -> StatusConfig:
    path = args.config or find_config_file()
    if path is None:
        return StatusConfig()
    unified = load_config(path)
    if STATUS_SECTION not in unified.present_sections:
        message = f"configuration file {path} does not define the '{STATUS_SECTION}' section"
        if args.config:
            raise ValueError(message)
        logger.warning("%s; using defaults", message)
    return unified.status


def _cmd_set_condition(args: argparse.Namespace, cfg: StatusConfig) -> None:
    path = Path(args.status_file)
    status = _load_status(path)
    ref = ParentReference(
        group=args.ancestor_group,
        kind=args.ancestor_kind,
        namespace=args.ancestor_namespace,
        name=args.ancestor_name,
        section_name=args.section_name,
    )
    controller = args.controller or cfg.controller_name
    set_condition_for_policy_ancestor(
        status,
        ref,
        controller,
        args.type,
        args.status,
        args.reason,
        args.message,
        args.generation,
    )
    if cfg.aggregate_on_overflow:
        truncate_policy_ancestors(
            status,
            controller,
            args.generation,
            max_ancestors=cfg.max_policy_ancestors,
        )
    _emit(status, path, args.write)


def _cmd_truncate(args: argparse.Namespace, cfg: StatusConfig) -> None:
    path = Path(args.status_file)
    status = _load_status(path)
    truncate_policy_ancestors(
        status,
        args.controller or cfg.controller_name,
        args.generation,
        max_ancestors=cfg.max_policy_ancestors,
    )
    _emit(status, path, args.write)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="policystatus",
        description="Maintain per-ancestor conditions in a policy status document.",
    )
    parser.add_argument("--config", help="Path to policystatus.yml")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_set = sub.add_parser("set-condition", help="Upsert a condition for one ancestor")
    p_set.add_argument("--status-file", required=True, help="YAML/JSON status document")
    p_set.add_argument("--ancestor-name", required=True)
    p_set.add_argument("--ancestor-namespace")
    p_set.add_argument("--ancestor-kind")
    p_set.add_argument("--ancestor-group")
    p_set.add_argument("--section-name")
    p_set.add_argument("--controller", help="Controller name (defaults to config)")
    p_set.add_argument("--type", required=True, help="Condition type, e.g. Accepted")
    p_set.add_argument(
        "--status",
        required=True,
        choices=[s.value for s in ConditionStatus],
    )
    p_set.add_argument("--reason", required=True)
    p_set.add_argument("--message", default="")
    p_set.add_argument("--generation", type=int, default=0)
    p_set.add_argument("--write", action="store_true", help="Write the result back")

    p_trunc = sub.add_parser("truncate", help="Cap the ancestor list")
    p_trunc.add_argument("--status-file", required=True)
    p_trunc.add_argument("--controller")
    p_trunc.add_argument("--generation", type=int, default=0)
    p_trunc.add_argument("--write", action="store_true")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    handlers: dict[str, Any] = {
        "set-condition": _cmd_set_condition,
        "truncate": _cmd_truncate,
    }
    try:
        cfg = _resolve_config(args)
        handlers[args.cmd](args, cfg)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
