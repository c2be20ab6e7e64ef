from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from .model import polygon_area, polygon_perimeter


def parse_number(value: Union[str, float, int, None]) -> float:
    """Parse user-entered numeric text; anything unusable becomes 0.0.

    A comma is accepted as decimal separator. NaN and infinities are treated
    as unusable.
    """
    if value is None:
        return 0.0
    if isinstance(value, str):
        text = value.strip().replace('\u00a0', '').replace(' ', '').replace(',', '.')
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


@dataclass(frozen=True)
class AreaResult:
    pixel_area: float
    meters_per_pixel: float
    physical_area: float
    manual_area: float
    perimeter_m: float = 0.0

    @property
    def uses_manual(self) -> bool:
        return self.manual_area > 0

    @property
    def reported(self) -> int:
        """Area in whole square metres as handed to the rest of the application."""
        if self.manual_area > 0:
            return round_area(self.manual_area)
        if self.physical_area > 0:
            return round_area(self.physical_area)
        return 0


def round_area(value: float) -> int:
    # Half-up; Python round() would give banker's rounding.
    return int(math.floor(value + 0.5))


def compute_area(vertices: Sequence[Tuple[float, float]], meters_per_pixel: float,
                 manual: Optional[Union[str, float]] = None) -> AreaResult:
    pixel_area = polygon_area(vertices)
    mpp = meters_per_pixel if meters_per_pixel > 0 and math.isfinite(meters_per_pixel) else 0.0
    physical = pixel_area * mpp * mpp
    perimeter = polygon_perimeter(vertices) * mpp if len(vertices) >= 3 else 0.0
    manual_area = max(parse_number(manual), 0.0)
    return AreaResult(
        pixel_area=pixel_area,
        meters_per_pixel=mpp,
        physical_area=physical,
        manual_area=manual_area,
        perimeter_m=perimeter,
    )
