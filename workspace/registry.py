from __future__ import annotations

import logging

from workspace.cards import Card, Position, infer_kind, new_card_id
from workspace.errors import ValidationError

log = logging.getLogger(__name__)

DEFAULT_VIEWPORT = (1200, 760)


class CardRegistry:
    """
    Owns the launcher cards and their placement.

    Every mutation that changes placement or adds a card is written to ``store``
    (anything with a ``save(cards)`` method) before listeners are told about it.
    """

    def __init__(self, cards=None, store=None, viewport=DEFAULT_VIEWPORT):
        self.cards: list[Card] = []
        self.store = store
        self.interface = None
        self.width, self.height = viewport
        for card in cards or ():
            if self.get(card.id) is not None:
                raise ValueError(f"duplicate card id: {card.id}")
            self.cards.append(card)

    def registerInterface(self, interface):
        self.interface = interface
        interface.registry = self

    def set_viewport(self, width, height):
        self.width = width
        self.height = height

    def viewport_center(self) -> Position:
        return Position(self.width / 2, self.height / 2)

    def list(self) -> list[Card]:
        return list(self.cards)

    def list_visible(self) -> list[Card]:
        return [card for card in self.cards if not card.contained]

    def list_contained(self) -> list[Card]:
        return [card for card in self.cards if card.contained]

    def get(self, card_id):
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def __len__(self):
        return len(self.cards)

    def add(self, name, action, icon_ref) -> Card:
        name = (name or "").strip()
        action = (action or "").strip()
        if not name:
            raise ValidationError("请输入名称")
        if not action:
            raise ValidationError("请输入链接或启动目标")
        if not icon_ref:
            raise ValidationError("请选择图标")

        card_id = new_card_id()
        while self.get(card_id) is not None:
            card_id = new_card_id()
        card = Card(
            id=card_id,
            name=name,
            icon_ref=icon_ref,
            kind=infer_kind(action),
            action=action,
            position=self.viewport_center(),
            contained=False,
        )
        self.cards.append(card)
        log.info("Added card %s (%s, %s)", card.id, card.name, card.kind)
        self._persist()
        if self.interface is not None:
            self.interface.onCardAdded(card)
        return card

    def commit_move(self, card_id, position: Position, contained: bool) -> bool:
        card = self.get(card_id)
        if card is None:
            log.debug("Ignoring move for unknown card %s", card_id)
            return False
        card.position = position
        card.contained = bool(contained)
        log.debug("Committed %s -> (%.1f, %.1f) contained=%s", card_id, position.x, position.y, card.contained)
        self._persist()
        if self.interface is not None:
            self.interface.onCardMoved(card)
        return True

    def reset_to_defaults(self, default_positions: dict):
        center = self.viewport_center()
        for card in self.cards:
            card.position = default_positions.get(card.id, center)
            card.contained = False
        log.info("Layout reset (%d cards)", len(self.cards))
        self._persist()
        if self.interface is not None:
            self.interface.onLayoutReset()

    def _persist(self):
        # In-memory state stays authoritative when the write fails.
        if self.store is None:
            return
        if self.store.save(self.cards) is False and self.interface is not None:
            self.interface.onPersistFailed()
