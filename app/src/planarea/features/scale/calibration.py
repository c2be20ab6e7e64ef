from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...core.area import parse_number
from ...core.model import ImagePoint, distance

# Real lengths are typed in millimetres; ratios are reported per metre.
MM_PER_METER = 1000.0


@dataclass
class CalibrationLine:
    """Reference line of known length drawn over the plan.

    Holds at most two points in image space. A click after the line is
    complete starts a new line instead of extending it.
    """

    points: List[ImagePoint] = field(default_factory=list)
    real_length: str = ""

    def add_or_reset_point(self, p: ImagePoint) -> None:
        if len(self.points) >= 2:
            self.points = [p]
        else:
            self.points.append(p)

    def set_real_length(self, value: Optional[str]) -> None:
        self.real_length = "" if value is None else str(value)

    def reset(self) -> None:
        self.points = []
        self.real_length = ""

    @property
    def is_complete(self) -> bool:
        return len(self.points) == 2

    @property
    def midpoint(self) -> Optional[ImagePoint]:
        if not self.is_complete:
            return None
        a, b = self.points
        return ImagePoint((a.x + b.x) / 2, (a.y + b.y) / 2)

    @property
    def pixel_distance(self) -> float:
        if not self.is_complete:
            return 0.0
        return distance(self.points[0], self.points[1])

    @property
    def real_length_mm(self) -> float:
        return max(parse_number(self.real_length), 0.0)

    @property
    def meters_per_pixel(self) -> float:
        px = self.pixel_distance
        meters = self.real_length_mm / MM_PER_METER
        if px > 0 and meters > 0:
            return meters / px
        return 0.0

    @property
    def mm_per_pixel(self) -> float:
        return self.meters_per_pixel * MM_PER_METER
