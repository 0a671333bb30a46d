import json
import logging
from pathlib import Path

from workspace.cards import CARD_KINDS, Card, Position, infer_kind
from workspace.errors import PersistenceParseFailure

log = logging.getLogger(__name__)

STORE_PATH = Path(__file__).with_name("workspace_store.json")
LAYOUT_KEY = "alpha-workspace-layout"


class KeyValueStore:
    """A flat JSON object on disk. Values are JSON strings, like browser local storage."""

    def __init__(self, path=None):
        self.path = Path(path) if path is not None else STORE_PATH

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as exc:
            log.warning("Unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Store %s is not a JSON object, ignoring it", self.path)
            return {}
        return data

    def get(self, key):
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def _write_all(self, data: dict):
        # Readers never see a half-written file.
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def set(self, key, value: str):
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key):
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        self._write_all(data)


def card_to_record(card: Card) -> dict:
    return {
        "id": card.id,
        "position": card.position.to_dict(),
        "inBucket": card.contained,
        "name": card.name,
        "action": card.action,
        "kind": card.kind,
        "icon": card.icon_ref,
    }


def _as_float(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PersistenceParseFailure(f"not a number: {value!r}")
    return float(value)


def _as_bool(value):
    if not isinstance(value, bool):
        raise PersistenceParseFailure(f"not a boolean: {value!r}")
    return value


def parse_entry(entry) -> dict:
    if not isinstance(entry, dict):
        raise PersistenceParseFailure(f"layout entry is not an object: {entry!r}")
    card_id = entry.get("id")
    if not isinstance(card_id, str) or not card_id:
        raise PersistenceParseFailure(f"layout entry without id: {entry!r}")
    pos = entry.get("position")
    if not isinstance(pos, dict):
        raise PersistenceParseFailure(f"layout entry {card_id} has no position")
    return {
        "id": card_id,
        "position": Position(_as_float(pos.get("x")), _as_float(pos.get("y"))),
        "inBucket": _as_bool(entry.get("inBucket", False)),
        "name": entry.get("name"),
        "action": entry.get("action"),
        "kind": entry.get("kind"),
        "icon": entry.get("icon"),
    }


def parse_layout(raw: str) -> list[dict]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise PersistenceParseFailure(f"layout is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise PersistenceParseFailure("layout is not a list")
    entries = []
    for item in data:
        try:
            entries.append(parse_entry(item))
        except PersistenceParseFailure as exc:
            log.warning("Skipping layout entry: %s", exc)
    return entries


def _restore_card(entry: dict):
    name = entry.get("name")
    action = entry.get("action")
    if not isinstance(name, str) or not name or not isinstance(action, str) or not action:
        return None
    kind = entry.get("kind")
    if kind not in CARD_KINDS:
        kind = infer_kind(action)
    icon = entry.get("icon")
    return Card(
        id=entry["id"],
        name=name,
        icon_ref=icon if isinstance(icon, str) else "",
        kind=kind,
        action=action,
        position=entry["position"],
        contained=entry["inBucket"],
    )


class LayoutStore:
    def __init__(self, kv=None, key=LAYOUT_KEY):
        self.kv = kv if kv is not None else KeyValueStore()
        self.key = key

    def save(self, cards) -> bool:
        payload = [card_to_record(card) for card in cards]
        try:
            self.kv.set(self.key, json.dumps(payload, ensure_ascii=False))
        except OSError as exc:
            log.warning("Could not save layout to %s: %s", getattr(self.kv, "path", self.kv), exc)
            return False
        return True

    def load(self, seed_cards) -> list[Card]:
        """
        Overlay the saved placement on ``seed_cards``.

        Seed cards keep their own placement when nothing was saved for them.
        Saved cards missing from the seed are rebuilt from their stored fields;
        entries too thin to rebuild are dropped.
        """
        seed = [card.copy() for card in seed_cards]
        raw = self.kv.get(self.key)
        if raw is None:
            return seed
        try:
            entries = parse_layout(raw)
        except PersistenceParseFailure as exc:
            log.warning("Saved layout ignored, using defaults: %s", exc)
            return seed

        saved = {}
        for entry in entries:
            saved.setdefault(entry["id"], entry)

        out = []
        for card in seed:
            entry = saved.pop(card.id, None)
            if entry is not None:
                card.position = entry["position"]
                card.contained = entry["inBucket"]
            out.append(card)

        for entry in saved.values():
            card = _restore_card(entry)
            if card is None:
                log.info("Dropping saved layout entry %s with no card data", entry["id"])
                continue
            out.append(card)
        return out

    def clear(self) -> bool:
        try:
            self.kv.remove(self.key)
        except OSError as exc:
            log.warning("Could not clear saved layout: %s", exc)
            return False
        return True
