from __future__ import annotations

import argparse
import sys

from workspace.cards import Position, default_cards, default_positions
from workspace.errors import ValidationError
from workspace.layout_store import KeyValueStore, LayoutStore
from workspace.logging_utils import configure_logging
from workspace.registry import CardRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="workspace-cli", description="Inspect and edit the saved workspace layout.")
    parser.add_argument("--store", type=str, default="", help="Store file (defaults to the app's store).")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Log level.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Print every card and where it sits.")
    sub.add_parser("where", help="Print the store file path.")
    sub.add_parser("reset", help="Restore the default layout.")

    add = sub.add_parser("add", help="Add a launcher card.")
    add.add_argument("name")
    add.add_argument("action", help="URL or local launch target.")
    add.add_argument("icon", help="Icon reference (image path or builtin:<name>).")

    move = sub.add_parser("move", help="Place a card.")
    move.add_argument("card_id")
    move.add_argument("x", type=float)
    move.add_argument("y", type=float)
    move.add_argument("--contained", action="store_true", help="Put the card in the reservoir.")
    return parser


def format_card(card) -> str:
    where = "reservoir" if card.contained else "surface"
    return f"{card.id:<40} {card.name:<16} {card.kind:<12} ({card.position.x:.0f}, {card.position.y:.0f}) {where}"


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, to_file=False)

    kv = KeyValueStore(args.store) if args.store else KeyValueStore()
    store = LayoutStore(kv)
    registry = CardRegistry(store.load(default_cards()), store=store)

    if args.command == "where":
        print(kv.path)
    elif args.command == "list":
        for card in registry.list():
            print(format_card(card))
    elif args.command == "reset":
        registry.reset_to_defaults(default_positions())
        print(f"Reset {len(registry)} cards.")
    elif args.command == "add":
        try:
            card = registry.add(args.name, args.action, args.icon)
        except ValidationError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        print(format_card(card))
    elif args.command == "move":
        if not registry.commit_move(args.card_id, Position(args.x, args.y), args.contained):
            print(f"Unknown card: {args.card_id}", file=sys.stderr)
            return 1
        print(format_card(registry.get(args.card_id)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
