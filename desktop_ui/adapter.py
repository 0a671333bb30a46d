from desktop_ui.view_model import ReservoirItemView, SurfaceViewModel, TileView
from workspace.drag import DragController
from workspace.registry import CardRegistry


class RegistryAdapter:
    """Bridges registry state plus the live drag override to a renderer-friendly model."""

    @staticmethod
    def snapshot(registry: CardRegistry, drag: DragController) -> SurfaceViewModel:
        dragged_id = drag.session.card_id if drag.session is not None else None
        tiles = []
        reservoir = []
        for card in registry.list():
            if card.id == dragged_id:
                continue
            if card.contained:
                reservoir.append(ReservoirItemView(id=card.id, name=card.name, icon_ref=card.icon_ref))
                continue
            tiles.append(RegistryAdapter._tile(card, card.position, False))

        # The dragged card is drawn last so it stays on top, even when it came out of the reservoir.
        if dragged_id is not None:
            card = registry.get(dragged_id)
            if card is not None:
                tiles.append(RegistryAdapter._tile(card, drag.presentation_position(card), True))

        return SurfaceViewModel(tiles=tuple(tiles), reservoir=tuple(reservoir), dragged_id=dragged_id)

    @staticmethod
    def _tile(card, position, dragging):
        return TileView(
            id=card.id,
            name=card.name,
            icon_ref=card.icon_ref,
            kind=card.kind,
            x=position.x,
            y=position.y,
            dragging=dragging,
        )
