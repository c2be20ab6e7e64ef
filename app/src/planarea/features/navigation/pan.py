from __future__ import annotations

from dataclasses import dataclass

from ...core.model import CanvasPoint
from .viewport import ViewportState


def pan_by(viewport: ViewportState, dx: float, dy: float) -> None:
    """Shift the view by a canvas-pixel delta. Panning is not clamped."""
    viewport.pan = CanvasPoint(viewport.pan.x + dx, viewport.pan.y + dy)


@dataclass
class PanSession:
    """Right-button or space-held drag in progress."""

    last: CanvasPoint


def on_pan_start(pos: CanvasPoint) -> PanSession:
    return PanSession(last=pos)


def on_pan_move(viewport: ViewportState, session: PanSession, pos: CanvasPoint) -> None:
    pan_by(viewport, pos.x - session.last.x, pos.y - session.last.y)
    session.last = pos
