from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import RelicsSettings
from .exceptions import RegistryDecodeError, RegistryStoreError, SettingsError
from .logging_config import configure_logging
from .model.registry import RelicRegistry, sorted_by_rarity
from .persistence.store import RegistryStore

logger = logging.getLogger(__name__)


def _store(args: argparse.Namespace) -> RegistryStore:
    settings: RelicsSettings = args.settings
    path = Path(args.file) if args.file else settings.registry_path
    return RegistryStore(path, settings.claim_policy)


def _format_entry(registry: RelicRegistry, relic) -> str:
    owner = registry.owner_of(relic)
    owned = f"owned by {owner}" if owner is not None else "unclaimed"
    return f" - {relic.rarity.value} {relic.name} ({owned})"


def _cmd_show(args: argparse.Namespace) -> int:
    registry = _store(args).load()
    relics = registry.owned() if args.owned else registry.all()
    print("Claimed Relics:" if args.owned else "All Relics:")
    for relic in sorted_by_rarity(relics):
        print(_format_entry(registry, relic))
    return 0


def _cmd_top(args: argparse.Namespace) -> int:
    registry = _store(args).load()
    print("Top Relic Holders:")
    for place, (owner, points) in enumerate(registry.leaderboard(args.limit), start=1):
        print(f" {place}. {owner}: {points} points")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    store = _store(args)
    try:
        registry = store.load()
    except RegistryDecodeError as e:
        print(f"INVALID: {store.path}\n{e.to_human()}")
        return 1
    print(f"OK: {store.path} ({len(registry)} relics, {len(registry.owned())} owned)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="relics", description="Inspect a persisted relic registry")
    p.add_argument("--config", help="User settings YAML file", default=None)
    p.add_argument("--file", help="Registry JSON file (overrides registry_path from settings)", default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("show", help="List relics by descending rarity")
    s.add_argument("--owned", action="store_true", help="Only list relics that have an owner")
    s.set_defaults(func=_cmd_show)

    t = sub.add_parser("top", help="Rank owners by total relic points")
    t.add_argument("--limit", type=int, default=None, help="Show at most this many owners")
    t.set_defaults(func=_cmd_top)

    v = sub.add_parser("validate", help="Check that the registry file can be loaded")
    v.set_defaults(func=_cmd_validate)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.settings = RelicsSettings.load(Path(args.config) if args.config else None)
    except SettingsError as e:
        parser.error(str(e))
    configure_logging(level_name=args.settings.log_level)
    try:
        return args.func(args)
    except (RegistryDecodeError, RegistryStoreError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
