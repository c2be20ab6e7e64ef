from __future__ import annotations

import csv
import datetime
import logging
from typing import TYPE_CHECKING, Iterable

try:
    from tkinter import filedialog, messagebox
except Exception:  # pragma: no cover
    filedialog = None  # type: ignore
    messagebox = None  # type: ignore

from ..features.results.results import SavedResult

if TYPE_CHECKING:
    from ..gui_client import MeasureAppGUI

logger = logging.getLogger(__name__)

CSV_HEADER = ('id', 'name', 'area_m2', 'scale_mm_per_px', 'saved_at')


def write_results_csv(results: Iterable[SavedResult], path: str) -> int:
    """Write saved result cards to ``path``; returns the number of rows written."""
    rows = 0
    with open(path, 'w', encoding='utf-8', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for r in results:
            saved = datetime.datetime.fromtimestamp(r.saved_at).isoformat(timespec='seconds')
            scale = '' if r.scale_mm_per_px is None else f"{r.scale_mm_per_px:.6g}"
            writer.writerow((r.id, r.name, r.area_m2, scale, saved))
            rows += 1
    logger.debug("Exported %s results to %s", rows, path)
    return rows


def export_csv(app: "MeasureAppGUI") -> None:
    results = app.session.results
    if not results.results:
        if messagebox:
            messagebox.showwarning("Warning", "No saved areas to export.")
        return
    if filedialog is None:
        return
    path = filedialog.asksaveasfilename(title="Save CSV", defaultextension='.csv', filetypes=[("CSV files", "*.csv")])
    if not path:
        return
    try:
        write_results_csv(results.results, path)
        if messagebox:
            messagebox.showinfo("Export", "Measurements exported successfully.")
    except OSError as e:
        logger.error("CSV export to %s failed: %s", path, e)
        if messagebox:
            messagebox.showerror("Error", f"Failed to export CSV: {e}")
