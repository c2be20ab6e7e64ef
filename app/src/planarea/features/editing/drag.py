from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.model import ImagePoint, snap_to_axis
from .draw import PolygonEditor


@dataclass
class DragSession:
    """A vertex drag between pointer-down on a handle and pointer-up."""

    vertex_index: int
    anchor: Optional[ImagePoint]
    original: ImagePoint


def begin_drag(poly: PolygonEditor, index: int) -> Optional[DragSession]:
    if index < 0 or index >= len(poly.vertices):
        return None
    anchor_idx = poly.anchor_index(index)
    anchor = poly.vertices[anchor_idx] if anchor_idx is not None else None
    return DragSession(vertex_index=index, anchor=anchor, original=poly.vertices[index])


def update_drag(poly: PolygonEditor, session: DragSession, p: ImagePoint, snap: bool = False) -> ImagePoint:
    """Move the dragged vertex to ``p``, optionally axis-aligned to its neighbour."""
    idx = session.vertex_index
    if idx >= len(poly.vertices):
        return session.original
    # Re-read the neighbour so a snap follows the current outline.
    anchor_idx = poly.anchor_index(idx)
    anchor = poly.vertices[anchor_idx] if anchor_idx is not None else None
    session.anchor = anchor
    if snap and anchor is not None:
        p = snap_to_axis(p, anchor)
    new_pt = ImagePoint(p.x, p.y)
    poly.vertices[idx] = new_pt
    return new_pt


def end_drag(poly: PolygonEditor, session: DragSession) -> bool:
    """Finish a drag; returns True when the vertex ended up somewhere new."""
    idx = session.vertex_index
    if idx >= len(poly.vertices):
        return False
    return poly.vertices[idx] != session.original


def cancel_drag(poly: PolygonEditor, session: DragSession) -> None:
    """Put the dragged vertex back where the drag started."""
    if 0 <= session.vertex_index < len(poly.vertices):
        poly.vertices[session.vertex_index] = session.original
