from dataclasses import dataclass


@dataclass(frozen=True)
class TileView:
    id: str
    name: str
    icon_ref: str
    kind: str
    x: float
    y: float
    dragging: bool


@dataclass(frozen=True)
class ReservoirItemView:
    id: str
    name: str
    icon_ref: str


@dataclass(frozen=True)
class SurfaceViewModel:
    tiles: tuple[TileView, ...]
    reservoir: tuple[ReservoirItemView, ...]
    dragged_id: str | None
