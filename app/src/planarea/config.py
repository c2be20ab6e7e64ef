from __future__ import annotations

import copy
import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

# ---------- Defaults ----------
DEFAULT_CONFIG: Dict[str, Any] = {
    # Viewport
    'canvas_width': 1000,
    'canvas_height': 650,
    'zoom_min': 0.2,
    'zoom_max': 8.0,
    'zoom_step': 1.2,
    'wheel_zoom_sensitivity': 0.0015,
    # Editing (screen pixels, independent of zoom)
    'hit_radius_px': 8.0,
    'handle_radius_px': 4.0,
    'line_width_px': 2.0,
    'label_font_px': 12.0,
    'label_offset_px': 6.0,
    # PDF rasterisation
    'pdf_target_max_px': 2200,
    'pdf_max_scale': 4.0,
    # Saved results
    'duplicate_window_s': 2.0,
    # Colours
    'background_color': '#0f172a',
    'placeholder_color': '#94a3b8',
    'calibration_color': '#22d3ee',
    'polygon_color': '#60a5fa',
    'polygon_fill': '#60a5fa',
    'first_vertex_color': '#f59e0b',
    'label_color': '#e2e8f0',
}


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return defaults updated with the known keys of ``overrides``.

    Unknown keys are dropped with a warning; values are coerced to the type
    of the default they replace.
    """
    cfg = default_config()
    for key, value in overrides.items():
        if key not in DEFAULT_CONFIG:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        kind = type(DEFAULT_CONFIG[key])
        try:
            cfg[key] = kind(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring config key %r: cannot use %r as %s", key, value, kind.__name__)
    return cfg


def load_config(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    logger.debug("Loaded config from %s", path)
    return merge_config(data)


def save_config(cfg: Dict[str, Any], path: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, indent=2)
    logger.debug("Saved config to %s", path)
