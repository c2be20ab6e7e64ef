from __future__ import annotations

from ...core.model import CanvasPoint
from .viewport import ViewportState


def _apply_rotation(viewport: ViewportState, steps: int) -> None:
    # Stored points stay in unrotated image space; only the view turns.
    viewport.rotation_steps = steps % 4
    viewport.zoom = 1.0
    viewport.pan = CanvasPoint(0.0, 0.0)


def rotate_right(viewport: ViewportState) -> None:
    """Rotate the view 90 degrees clockwise."""
    _apply_rotation(viewport, viewport.rotation_steps + 1)


def rotate_left(viewport: ViewportState) -> None:
    """Rotate the view 90 degrees counter-clockwise."""
    _apply_rotation(viewport, viewport.rotation_steps - 1)
