import re
import uuid
from dataclasses import dataclass, field, replace

NETWORK_LINK = "NetworkLink"
LOCAL_LAUNCH = "LocalLaunch"
CARD_KINDS = (NETWORK_LINK, LOCAL_LAUNCH)

URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def __add__(self, other):
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Position(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class Card:
    id: str
    name: str
    icon_ref: str
    kind: str
    action: str
    position: Position = field(default_factory=lambda: Position(0.0, 0.0))
    contained: bool = False

    def copy(self) -> "Card":
        return replace(self)


def infer_kind(action: str) -> str:
    if URL_SCHEME_RE.match(action or ""):
        return NETWORK_LINK
    return LOCAL_LAUNCH


def new_card_id() -> str:
    return f"card-{uuid.uuid4().hex}"


def default_cards() -> list[Card]:
    """The launchers every fresh workspace starts with."""
    return [
        Card(
            id="drawio",
            name="draw.io",
            icon_ref="builtin:drawio",
            kind=NETWORK_LINK,
            action="https://app.diagrams.net/",
            position=Position(300.0, 200.0),
        ),
        Card(
            id="typora",
            name="typora",
            icon_ref="builtin:typora",
            kind=LOCAL_LAUNCH,
            action="typora",
            position=Position(500.0, 200.0),
        ),
        Card(
            id="gemini",
            name="gemini",
            icon_ref="builtin:gemini",
            kind=NETWORK_LINK,
            action="https://gemini.google.com/",
            position=Position(400.0, 350.0),
        ),
        Card(
            id="aistudio",
            name="AI Studio",
            icon_ref="builtin:aistudio",
            kind=NETWORK_LINK,
            action="https://aistudio.google.com/",
            position=Position(300.0, 500.0),
            contained=True,
        ),
        Card(
            id="notebooklm",
            name="NotebookLM",
            icon_ref="builtin:notebooklm",
            kind=NETWORK_LINK,
            action="https://notebooklm.google.com/",
            position=Position(500.0, 500.0),
            contained=True,
        ),
    ]


def default_positions() -> dict[str, Position]:
    return {card.id: card.position for card in default_cards()}
