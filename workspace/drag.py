import logging
from dataclasses import dataclass
from typing import Optional

from workspace.cards import Card, Position
from workspace.containment import contains_point

log = logging.getLogger(__name__)


@dataclass
class DragSession:
    card_id: str
    pointer_offset: Position
    press_pointer: Position
    last_pointer: Position
    moved: bool = False


@dataclass(frozen=True)
class DropResult:
    card_id: str
    position: Position
    contained: bool
    moved: bool
    committed: bool


class DragController:
    """
    Press/move/release state machine for one pointer gesture.

    While a session is live only ``override`` changes; the registry is written
    once, on release. ``session is None`` means Idle.
    """

    def __init__(self, registry, notifications=None):
        self.registry = registry
        self.notifications = notifications
        self.session: Optional[DragSession] = None
        self.override: Optional[tuple[str, Position]] = None
        self.suppress_click_for: Optional[str] = None

    @property
    def dragging(self):
        return self.session is not None

    def press(self, card_id, pointer: Position, origin: Optional[Position] = None) -> bool:
        if self.session is not None:
            return False
        card = self.registry.get(card_id)
        if card is None:
            return False
        start = origin if origin is not None else card.position
        self.session = DragSession(
            card_id=card_id,
            pointer_offset=pointer - start,
            press_pointer=pointer,
            last_pointer=pointer,
        )
        self.override = (card_id, start)
        return True

    def move(self, pointer: Position):
        session = self.session
        if session is None:
            return None
        session.last_pointer = pointer
        if not session.moved and pointer != session.press_pointer:
            session.moved = True
        candidate = pointer - session.pointer_offset
        self.override = (session.card_id, candidate)
        return candidate

    def release(self, reservoir_rect=None, pointer: Optional[Position] = None) -> Optional[DropResult]:
        session = self.session
        if session is None:
            return None
        if pointer is not None:
            self.move(pointer)
        rect = reservoir_rect() if callable(reservoir_rect) else reservoir_rect
        release_point = session.last_pointer
        final_position = release_point - session.pointer_offset
        contained = contains_point(rect, release_point)
        try:
            committed = self.registry.commit_move(session.card_id, final_position, contained)
        finally:
            self.session = None
            self.override = None
            self.suppress_click_for = session.card_id if session.moved else None

        if committed and contained and self.notifications is not None:
            card = self.registry.get(session.card_id)
            self.notifications.push(f"「{card.name}」已放入收纳桶", "success")
        return DropResult(
            card_id=session.card_id,
            position=final_position,
            contained=contained,
            moved=session.moved,
            committed=committed,
        )

    def abandon(self, reservoir_rect=None) -> Optional[DropResult]:
        if self.session is None:
            return None
        log.debug("Drag of %s abandoned, resolving at last pointer sample", self.session.card_id)
        return self.release(reservoir_rect)

    def cancel(self):
        """Drop the live session without committing anything."""
        self.session = None
        self.override = None
        self.suppress_click_for = None

    def activate(self, card_id) -> bool:
        """Whether a click on ``card_id`` should run the card's action."""
        if self.session is not None:
            return False
        suppressed = self.suppress_click_for == card_id
        self.suppress_click_for = None
        return not suppressed

    def presentation_position(self, card: Card) -> Position:
        if self.override is not None and self.override[0] == card.id:
            return self.override[1]
        return card.position
