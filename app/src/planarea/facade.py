from __future__ import annotations

"""
A thin facade that re-exports the calibrator's feature functions.
GUI code can import just this module to avoid scattered imports.
"""

# Session and derived values
from .core.session import MeasureSession as MeasureSession
from .core.area import (
    AreaResult as AreaResult,
    compute_area as area_compute,
    parse_number as area_parse_number,
)

# Calibration
from .features.scale.calibration import CalibrationLine as CalibrationLine

# Editing
from .features.editing.draw import PolygonEditor as PolygonEditor
from .features.editing.drag import (
    begin_drag as drag_start,
    update_drag as drag_move,
    end_drag as drag_end,
    cancel_drag as drag_cancel,
)

# Navigation
from .features.navigation.viewport import (
    ViewportState as ViewportState,
    ViewGeometry as ViewGeometry,
    compose as view_compose,
    canvas_to_image as view_canvas_to_image,
    image_to_canvas as view_image_to_canvas,
)
from .features.navigation.zoom import (
    zoom_at as zoom_at,
    zoom_in as zoom_in,
    zoom_out as zoom_out,
    on_wheel as zoom_on_wheel,
)
from .features.navigation.pan import pan_by as pan_canvas
from .features.navigation.rotate import (
    rotate_left as rotate_left,
    rotate_right as rotate_right,
)

# File I/O + config
from .file_io import (
    load_plan as file_load_plan,
    load_page as file_load_page,
)
from .config import (
    load_config as file_load_config,
    save_config as file_save_config,
)

# Render + export
from .ui.render import build_commands as render_commands
from .app_io.export_mod import (
    export_csv as export_csv,
    write_results_csv as export_results_csv,
)
