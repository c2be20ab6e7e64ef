"""
Pure render step: session state in, ordered draw commands out.

Commands between ``BeginView`` and ``EndView`` are expressed in image space
(unrotated bitmap pixels).  Their widths, radii, font sizes and offsets are
already divided by the effective scale so that, once the painter applies the
view transform, they come out at a constant size in screen pixels.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.model import ImagePoint, polygon_centroid
from ..features.navigation.viewport import ViewTransform

PLACEHOLDER_TEXT = "Load a plan (JPG/PNG/PDF) or paste a screenshot"


@dataclass(frozen=True)
class FillBackground:
    color: str


@dataclass(frozen=True)
class CenteredText:
    text: str
    color: str
    font_px: float


@dataclass(frozen=True)
class BeginView:
    transform: ViewTransform


@dataclass(frozen=True)
class DrawImage:
    rotation_steps: int


@dataclass(frozen=True)
class Segment:
    a: ImagePoint
    b: ImagePoint
    width: float
    color: str


@dataclass(frozen=True)
class Handle:
    center: ImagePoint
    radius: float
    color: str


@dataclass(frozen=True)
class Label:
    anchor: ImagePoint
    offset: Tuple[float, float]
    text: str
    font_px: float
    color: str
    halo_color: str
    halo_width: float


@dataclass(frozen=True)
class Path:
    points: Tuple[ImagePoint, ...]
    closed: bool
    width: float
    stroke: str
    fill: Optional[str] = None


@dataclass(frozen=True)
class EndView:
    pass


DrawCommand = Union[FillBackground, CenteredText, BeginView, DrawImage, Segment, Handle, Label, Path, EndView]


def calibration_label(pixel_distance: float, mm_per_pixel: float) -> str:
    text = f"{pixel_distance:.1f} px"
    if mm_per_pixel > 0:
        text += f" ({pixel_distance * mm_per_pixel:.1f} mm)"
    return text


def _calibration_commands(session, cfg: Dict[str, Any], s: float) -> List[DrawCommand]:
    cal = session.calibration
    if not cal.points:
        return []
    color = cfg['calibration_color']
    cmds: List[DrawCommand] = []
    for a, b in zip(cal.points, cal.points[1:]):
        cmds.append(Segment(a, b, float(cfg['line_width_px']) / s, color))
    for p in cal.points:
        cmds.append(Handle(p, float(cfg['handle_radius_px']) / s, color))
    mid = cal.midpoint
    if mid is not None:
        cmds.append(_label(mid, calibration_label(cal.pixel_distance, cal.mm_per_pixel), cfg, s))
    return cmds


def _label(anchor: ImagePoint, text: str, cfg: Dict[str, Any], s: float) -> Label:
    off = float(cfg['label_offset_px']) / s
    return Label(
        anchor=anchor,
        offset=(off, -off),
        text=text,
        font_px=float(cfg['label_font_px']) / s,
        color=cfg['label_color'],
        halo_color=cfg['background_color'],
        halo_width=3.0 / s,
    )


def _polygon_commands(session, cfg: Dict[str, Any], s: float) -> List[DrawCommand]:
    poly = session.polygon
    if not poly.vertices:
        return []
    stroke = cfg['polygon_color']
    closed = poly.closed and len(poly.vertices) >= 3
    cmds: List[DrawCommand] = [Path(
        points=tuple(poly.vertices),
        closed=closed,
        width=float(cfg['line_width_px']) / s,
        stroke=stroke,
        fill=cfg['polygon_fill'] if closed else None,
    )]
    radius = float(cfg['handle_radius_px']) / s
    for i, p in enumerate(poly.vertices):
        cmds.append(Handle(p, radius, cfg['first_vertex_color'] if i == 0 else stroke))
    if closed:
        area = session.area()
        centroid = polygon_centroid(poly.vertices)
        if centroid is not None and area.physical_area > 0:
            cmds.append(_label(centroid, f"{area.physical_area:.2f} m²", cfg, s))
    return cmds


def build_commands(session) -> List[DrawCommand]:
    """Describe one frame for ``session`` (a ``MeasureSession``)."""
    cfg = session.config
    cmds: List[DrawCommand] = [FillBackground(cfg['background_color'])]
    if not session.has_image:
        cmds.append(CenteredText(PLACEHOLDER_TEXT, cfg['placeholder_color'], 16.0))
        return cmds
    transform = session.transform()
    s = transform.scale
    cmds.append(BeginView(transform))
    cmds.append(DrawImage(transform.rotation_steps))
    cmds.extend(_calibration_commands(session, cfg, s))
    cmds.extend(_polygon_commands(session, cfg, s))
    cmds.append(EndView())
    return cmds
