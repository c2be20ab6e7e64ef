from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...core.model import ImagePoint, distance, snap_to_axis

MIN_CLOSED_VERTICES = 3


@dataclass
class PolygonEditor:
    """Outline being traced over the plan, in image space.

    Vertex order is the boundary traversal order. Once closed, the outline
    only accepts vertex drags or a full ``clear``.
    """

    vertices: List[ImagePoint] = field(default_factory=list)
    closed: bool = False

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def can_close(self) -> bool:
        return not self.closed and len(self.vertices) >= MIN_CLOSED_VERTICES

    @property
    def can_undo(self) -> bool:
        return not self.closed and bool(self.vertices)

    def append_vertex(self, p: ImagePoint, snap_to_axis_: bool = False) -> bool:
        """Append ``p``; with snapping the new edge is made horizontal or vertical.

        Returns False when the outline is already closed.
        """
        if self.closed:
            return False
        if snap_to_axis_ and self.vertices:
            p = snap_to_axis(p, self.vertices[-1])
        self.vertices.append(ImagePoint(p.x, p.y))
        return True

    def close(self) -> bool:
        if not self.can_close:
            return False
        self.closed = True
        return True

    def undo_last(self) -> bool:
        if not self.can_undo:
            return False
        self.vertices.pop()
        return True

    def clear(self) -> None:
        self.vertices = []
        self.closed = False

    def hit_test(self, p: ImagePoint, radius: float) -> Optional[int]:
        """Return the lowest index of a vertex within ``radius`` of ``p``."""
        for i, v in enumerate(self.vertices):
            if distance(v, p) <= radius:
                return i
        return None

    def anchor_index(self, index: int) -> Optional[int]:
        """Neighbour used as the snapping reference for a dragged vertex."""
        if len(self.vertices) < 2:
            return None
        return 1 if index == 0 else index - 1
