from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import Image

try:
    import tkinter as tk
    from PIL import ImageTk
except ImportError:  # pragma: no cover
    tk = None  # type: ignore
    ImageTk = None  # type: ignore

from ..features.navigation.viewport import ViewTransform
from .render import (
    BeginView,
    CenteredText,
    DrawCommand,
    DrawImage,
    EndView,
    FillBackground,
    Handle,
    Label,
    Path,
    Segment,
)


def _resample():
    try:
        return Image.Resampling.LANCZOS
    except AttributeError:
        return Image.LANCZOS


def visible_crop(transform: ViewTransform, canvas_w: float, canvas_h: float) -> Optional[Tuple[int, int, int, int]]:
    """Part of the rotated bitmap that lands on the canvas, as a PIL crop box."""
    iw, ih = transform.view_dims
    s = transform.scale
    ox, oy = transform.origin
    x0 = max(0.0, -ox / s)
    y0 = max(0.0, -oy / s)
    x1 = min(iw, (canvas_w - ox) / s)
    y1 = min(ih, (canvas_h - oy) / s)
    if x1 <= x0 or y1 <= y0:
        return None
    return (int(math.floor(x0)), int(math.floor(y0)), int(math.ceil(x1)), int(math.ceil(y1)))


class CanvasPainter:
    """Realises draw commands on a Tk canvas."""

    def __init__(self, canvas: "tk.Canvas") -> None:
        self.canvas = canvas
        self.image: Optional[Image.Image] = None
        self.photo = None  # keep a reference or Tk drops the bitmap
        self._rotated: Dict[int, Image.Image] = {}
        self._transform: Optional[ViewTransform] = None

    def set_image(self, image: Optional[Image.Image]) -> None:
        self.image = image
        self._rotated.clear()
        self.photo = None

    def _rotated_image(self, steps: int) -> Image.Image:
        if steps not in self._rotated:
            # PIL turns counter-clockwise for positive angles.
            self._rotated[steps] = self.image.rotate(-90 * steps, expand=True) if steps else self.image
        return self._rotated[steps]

    def _size(self) -> Tuple[int, int]:
        return max(self.canvas.winfo_width(), 1), max(self.canvas.winfo_height(), 1)

    def _pt(self, p) -> Tuple[float, float]:
        c = self._transform.to_canvas(p)
        return c.x, c.y

    def paint(self, commands: Iterable[DrawCommand]) -> None:
        self.canvas.delete("all")
        w, h = self._size()
        for cmd in commands:
            if isinstance(cmd, FillBackground):
                self.canvas.create_rectangle(0, 0, w, h, fill=cmd.color, outline='')
            elif isinstance(cmd, CenteredText):
                self.canvas.create_text(w / 2, h / 2, text=cmd.text, fill=cmd.color,
                                        font=("TkDefaultFont", -int(cmd.font_px)))
            elif isinstance(cmd, BeginView):
                self._transform = cmd.transform
            elif isinstance(cmd, EndView):
                self._transform = None
            elif isinstance(cmd, DrawImage):
                self._draw_image(cmd, w, h)
            elif isinstance(cmd, Segment):
                self._draw_segment(cmd)
            elif isinstance(cmd, Path):
                self._draw_path(cmd)
            elif isinstance(cmd, Handle):
                self._draw_handle(cmd)
            elif isinstance(cmd, Label):
                self._draw_label(cmd)

    def _draw_image(self, cmd: DrawImage, w: int, h: int) -> None:
        if self.image is None or self._transform is None:
            return
        box = visible_crop(self._transform, w, h)
        if box is None:
            return
        s = self._transform.scale
        crop = self._rotated_image(cmd.rotation_steps).crop(box)
        size = (max(1, int(round(crop.width * s))), max(1, int(round(crop.height * s))))
        self.photo = ImageTk.PhotoImage(crop.resize(size, _resample()))
        ox, oy = self._transform.origin
        self.canvas.create_image(ox + box[0] * s, oy + box[1] * s, anchor=tk.NW, image=self.photo)

    def _draw_segment(self, cmd: Segment) -> None:
        x1, y1 = self._pt(cmd.a)
        x2, y2 = self._pt(cmd.b)
        self.canvas.create_line(x1, y1, x2, y2, fill=cmd.color, width=cmd.width * self._transform.scale)

    def _draw_path(self, cmd: Path) -> None:
        coords: List[float] = []
        for p in cmd.points:
            coords.extend(self._pt(p))
        width = cmd.width * self._transform.scale
        if cmd.closed:
            # Tk has no alpha; a stipple stands in for the translucent fill.
            self.canvas.create_polygon(coords, fill=cmd.fill or '', outline='', stipple='gray25')
            self.canvas.create_polygon(coords, fill='', outline=cmd.stroke, width=width)
        elif len(coords) >= 4:
            self.canvas.create_line(coords, fill=cmd.stroke, width=width)

    def _draw_handle(self, cmd: Handle) -> None:
        cx, cy = self._pt(cmd.center)
        r = cmd.radius * self._transform.scale
        self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r, fill=cmd.color, outline='')

    def _draw_label(self, cmd: Label) -> None:
        s = self._transform.scale
        ax, ay = self._pt(cmd.anchor)
        x = ax + cmd.offset[0] * s
        y = ay + cmd.offset[1] * s
        font = ("TkDefaultFont", -max(1, int(round(cmd.font_px * s))))
        halo = max(1, int(round(cmd.halo_width * s / 2)))
        self.canvas.create_text(x + halo, y + halo, text=cmd.text, fill=cmd.halo_color, font=font, anchor=tk.SW)
        self.canvas.create_text(x, y, text=cmd.text, fill=cmd.color, font=font, anchor=tk.SW)
