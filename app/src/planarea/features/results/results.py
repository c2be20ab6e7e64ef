from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from ...core.area import round_area

logger = logging.getLogger(__name__)

DUPLICATE_WINDOW_S = 2.0


@dataclass(frozen=True)
class SavedResult:
    id: int
    name: str
    area_m2: int
    scale_mm_per_px: Optional[float]
    saved_at: float


def result_name(file_name: Optional[str], index: int, page_number: int = 1, page_count: int = 0) -> str:
    """Card title: the file name (or "Plan N") plus a page suffix for multi-page PDFs."""
    base = file_name or f"Plan {index}"
    if page_count > 1:
        return f"{base} (p. {page_number})"
    return base


@dataclass
class ResultsLog:
    """Areas saved during this session."""

    results: List[SavedResult] = field(default_factory=list)
    duplicate_window_s: float = DUPLICATE_WINDOW_S
    _next_id: int = 1

    def save(self, name: str, area_m2: int, scale_mm_per_px: Optional[float] = None,
             now: Optional[float] = None) -> Optional[SavedResult]:
        """Store a card; returns None for non-positive areas and quick repeats."""
        if area_m2 <= 0:
            return None
        now = time.time() if now is None else now
        for r in self.results:
            if r.name == name and r.area_m2 == area_m2 and (now - r.saved_at) < self.duplicate_window_s:
                logger.debug("Dropping duplicate save of %s (%s m2)", name, area_m2)
                return None
        scale = scale_mm_per_px if scale_mm_per_px and scale_mm_per_px > 0 else None
        card = SavedResult(id=self._next_id, name=name, area_m2=area_m2, scale_mm_per_px=scale, saved_at=now)
        self._next_id += 1
        self.results.append(card)
        logger.debug("Saved result %s: %s m2", name, area_m2)
        return card

    def remove(self, result_id: int) -> bool:
        before = len(self.results)
        self.results = [r for r in self.results if r.id != result_id]
        return len(self.results) != before

    def clear(self) -> None:
        self.results = []

    def __len__(self) -> int:
        return len(self.results)

    @property
    def total_area(self) -> float:
        return float(sum(r.area_m2 for r in self.results))

    @property
    def total_area_rounded(self) -> int:
        return round_area(self.total_area)
