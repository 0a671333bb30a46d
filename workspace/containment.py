from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    @staticmethod
    def from_size(x, y, width, height):
        return Rect(x, y, x + width, y + height)

    @property
    def width(self):
        return self.right - self.left

    @property
    def height(self):
        return self.bottom - self.top


def contains_point(rect, point) -> bool:
    # Edges count as inside.
    if rect is None:
        return False
    return rect.left <= point.x <= rect.right and rect.top <= point.y <= rect.bottom
