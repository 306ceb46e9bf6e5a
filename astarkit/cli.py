from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .api import create_engine, solve
from .core.config import load_engine_config, normalize_engine_config, validate_engine_config
from .core.diagnostics import AstarError
from .core.results import ControlFlag
from .core.space_api import describe_space
from .core.space_loader import SpaceRegistry


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="astarkit")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate")
    validate.add_argument("-c", "--config", required=True)

    find = sub.add_parser("find")
    find.add_argument("-c", "--config", required=False)
    find.add_argument("--space", required=False)
    find.add_argument("--from", dest="from_node", required=True)
    find.add_argument("--to", dest="to_node", required=True)
    find.add_argument("--block", action="append", default=[], metavar="X,Y")
    find.add_argument("--no-cache", action="store_true")

    rand = sub.add_parser("random")
    rand.add_argument("-c", "--config", required=False)
    rand.add_argument("--seed", type=int, required=False)

    sub.add_parser("spaces")

    args = parser.parse_args(argv)

    if args.command == "spaces":
        _spaces()
        return

    config = load_engine_config(Path(args.config)) if args.config else {}

    if args.command == "validate":
        diagnostics = validate_engine_config(normalize_engine_config(config))
        if diagnostics.has_errors():
            for line in diagnostics.format():
                print(line, file=sys.stderr)
            print(json.dumps(diagnostics.to_list(), indent=2, sort_keys=True))
            raise SystemExit(1)
        print(json.dumps({"status": "ok"}))
        return

    if args.command == "find":
        config = _apply_find_overrides(config, args)
        _run(config, args.from_node, args.to_node, uncache=args.no_cache)
        return

    if args.command == "random":
        bundle = _bundle(config)
        endpoints = bundle.space.random_endpoints(random.Random(args.seed))
        if endpoints is None:
            raise SystemExit("Space has no nodes to pick from")
        session = solve(bundle.engine, *endpoints)
        _print_session(bundle.space, session)
        return


def _apply_find_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    cfg = normalize_engine_config(config)
    if args.space:
        if cfg["space"].get("type") != args.space:
            cfg["space"] = {"type": args.space, "options": {}}
    if args.block:
        options = cfg["space"].setdefault("options", {})
        blocked = list(options.get("blocked") or [])
        blocked.extend([int(part) for part in item.split(",")] for item in args.block)
        options["blocked"] = blocked
    return cfg


def _run(config: Dict[str, Any], from_text: str, to_text: str, *, uncache: bool) -> None:
    bundle = _bundle(config)
    flags = ControlFlag.UNCACHE if uncache else ControlFlag.NONE
    session = solve(
        bundle.engine,
        bundle.space.parse_node(from_text),
        bundle.space.parse_node(to_text),
        control_flags=flags,
    )
    _print_session(bundle.space, session)
    if not session.succeeded:
        raise SystemExit(2)


def _bundle(config: Dict[str, Any]):
    try:
        return create_engine(config)
    except AstarError as exc:
        print(exc.diagnostic.format(), file=sys.stderr)
        print(json.dumps([exc.diagnostic.to_dict()], indent=2, sort_keys=True))
        raise SystemExit(1)


def _print_session(space, session) -> None:
    payload = session.summary()
    payload["from"] = space.format_node(session.from_node)
    payload["to"] = space.format_node(session.to_node)
    if session.path is not None:
        payload["route"] = [space.format_node(node) for node in session.path.nodes]
    print(json.dumps(payload, indent=2, sort_keys=True, default=repr))


def _spaces() -> None:
    registry = SpaceRegistry()
    registry.discover()
    listing = [describe_space(registry.get(name)) for name in registry.names()]
    print(json.dumps(listing, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
