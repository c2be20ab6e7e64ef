#!/usr/bin/env python3
"""
GUI client for the plan area calibrator.

Load a floor plan (image or PDF page), draw a reference line of known length
to calibrate the scale, then trace the room outline to get its area in
square metres.  The canvas can be zoomed (Alt/Ctrl + wheel), panned (wheel,
right-button drag or Space + drag) and rotated in quarter turns.

Controls on the canvas:
  * Calibrate mode: click two points; a third click starts a new line.
  * Trace mode: click to add vertices (Shift keeps the edge horizontal or
    vertical), drag a vertex to move it (Shift snaps it to its neighbour),
    double-click to close, Ctrl+Z removes the last vertex.
  * Esc puts back a vertex that is being dragged.
  * PageUp/PageDown switch PDF pages; Ctrl+V pastes a screenshot.

Saved areas are kept for the session and can be exported to CSV.
"""

import importlib.util
import logging
import os
import sys
from typing import List, Optional

REQUIRED_PACKAGES = {
    "pymupdf": "pymupdf",
    "PIL": "pillow",
}

missing_packages = [
    package_name
    for module_name, package_name in REQUIRED_PACKAGES.items()
    if importlib.util.find_spec(module_name) is None
]

if missing_packages:
    unique = sorted(set(missing_packages))
    message = (
        "Missing required packages: "
        + ", ".join(unique)
        + "\nInstall them with: pip install "
        + " ".join(unique)
    )
    print(message, file=sys.stderr)
    raise SystemExit(1)

from PIL import Image, ImageGrab

try:
    import tkinter as tk
    from tkinter import filedialog, messagebox
except ImportError:
    # When Tkinter is unavailable (e.g. headless environment), set tk to None.
    tk = None  # type: ignore

from . import facade
from .config import default_config
from .core.model import CanvasPoint
from .core.session import BUTTON_LEFT, BUTTON_RIGHT, MODE_POLYGON, MODE_SCALE, MeasureSession
from .file_io import LoadedPlan
from .ui.painter import CanvasPainter
from .ui.render import build_commands

logger = logging.getLogger(__name__)

# Modifier bits in Tk event.state
SHIFT_MASK = 0x0001
CONTROL_MASK = 0x0004
ALT_MASK_X11 = 0x0008
ALT_MASK_WIN = 0x20000
# Browser-like wheel delta per notch
WHEEL_NOTCH = 100.0


class MeasureAppGUI:
    """Main class encapsulating the Tkinter application."""

    def __init__(self, root: "tk.Tk") -> None:
        self.root = root
        self.root.title("Plan Area Calibrator")
        self.root.geometry("1400x800")
        self.config = default_config()
        self.session = MeasureSession(self.config)
        self.plan: Optional[LoadedPlan] = None
        self._redraw_pending = False

        main_frame = tk.Frame(root)
        main_frame.pack(fill=tk.BOTH, expand=True)
        canvas_frame = tk.Frame(main_frame)
        canvas_frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.canvas = tk.Canvas(
            canvas_frame,
            bg=self.config['background_color'],
            width=self.config['canvas_width'],
            height=self.config['canvas_height'],
            highlightthickness=0,
        )
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self.painter = CanvasPainter(self.canvas)

        # Zoom, rotation and page controls beneath the canvas.
        ctrl_frame = tk.Frame(canvas_frame)
        ctrl_frame.pack(side=tk.BOTTOM, fill=tk.X)
        tk.Button(ctrl_frame, text="Zoom In", command=self.session.zoom_in).pack(side=tk.LEFT, padx=2)
        tk.Button(ctrl_frame, text="Zoom Out", command=self.session.zoom_out).pack(side=tk.LEFT, padx=2)
        tk.Button(ctrl_frame, text="Rotate Left", command=lambda: self.session.rotate(clockwise=False)).pack(side=tk.LEFT, padx=2)
        tk.Button(ctrl_frame, text="Rotate Right", command=lambda: self.session.rotate(clockwise=True)).pack(side=tk.LEFT, padx=2)
        self.next_page_btn = tk.Button(ctrl_frame, text="Next Page", command=lambda: self.go_to_page(+1))
        self.next_page_btn.pack(side=tk.RIGHT, padx=2)
        self.page_label = tk.Label(ctrl_frame, text="")
        self.page_label.pack(side=tk.RIGHT, padx=4)
        self.prev_page_btn = tk.Button(ctrl_frame, text="Prev Page", command=lambda: self.go_to_page(-1))
        self.prev_page_btn.pack(side=tk.RIGHT, padx=2)

        # Control panel on the right.
        side_frame = tk.Frame(main_frame, padx=6)
        side_frame.pack(side=tk.RIGHT, fill=tk.Y)
        tk.Button(side_frame, text="Load Plan", command=self.load_plan).pack(fill=tk.X)
        tk.Button(side_frame, text="Load Config", command=self.load_config).pack(fill=tk.X)
        tk.Button(side_frame, text="Save Config", command=self.save_config).pack(fill=tk.X)
        tk.Button(side_frame, text="Reset All", command=self.reset_all).pack(fill=tk.X)

        self.mode_var = tk.StringVar(value=self.session.mode)
        mode_frame = tk.LabelFrame(side_frame, text="Mode")
        mode_frame.pack(fill=tk.X, pady=(8, 0))
        tk.Radiobutton(mode_frame, text="Calibrate scale", variable=self.mode_var, value=MODE_SCALE,
                       command=self._on_mode).pack(anchor=tk.W)
        tk.Radiobutton(mode_frame, text="Trace outline", variable=self.mode_var, value=MODE_POLYGON,
                       command=self._on_mode).pack(anchor=tk.W)

        tk.Label(side_frame, text="Reference length (mm):").pack(anchor=tk.W, pady=(8, 0))
        self.real_length_var = tk.StringVar()
        self.real_length_var.trace_add("write", lambda *_: self.session.set_real_length(self.real_length_var.get()))
        tk.Entry(side_frame, textvariable=self.real_length_var).pack(fill=tk.X)
        tk.Button(side_frame, text="Reset Scale", command=self.reset_scale).pack(fill=tk.X)
        self.scale_label = tk.Label(side_frame, text="Scale: not set", justify=tk.LEFT)
        self.scale_label.pack(anchor=tk.W)

        self.close_btn = tk.Button(side_frame, text="Close Polygon", command=self.session.close_polygon)
        self.close_btn.pack(fill=tk.X, pady=(8, 0))
        self.undo_btn = tk.Button(side_frame, text="Undo Vertex", command=self.session.undo)
        self.undo_btn.pack(fill=tk.X)
        tk.Button(side_frame, text="Clear Polygon", command=self.session.clear_polygon).pack(fill=tk.X)

        tk.Label(side_frame, text="Manual area (m²):").pack(anchor=tk.W, pady=(8, 0))
        self.manual_area_var = tk.StringVar()
        self.manual_area_var.trace_add("write", lambda *_: self.session.set_manual_area(self.manual_area_var.get()))
        tk.Entry(side_frame, textvariable=self.manual_area_var).pack(fill=tk.X)
        self.info_label = tk.Label(side_frame, text="", justify=tk.LEFT)
        self.info_label.pack(anchor=tk.W)
        self.save_btn = tk.Button(side_frame, text="Save Area", command=self.save_area)
        self.save_btn.pack(fill=tk.X)

        tk.Label(side_frame, text="Saved areas:").pack(anchor=tk.W, pady=(8, 0))
        self.results_list = tk.Listbox(side_frame, height=8)
        self.results_list.pack(fill=tk.X)
        tk.Button(side_frame, text="Remove Selected", command=self.remove_selected_result).pack(fill=tk.X)
        tk.Button(side_frame, text="Export CSV", command=lambda: facade.export_csv(self)).pack(fill=tk.X)
        self.total_label = tk.Label(side_frame, text="Total: 0 m²")
        self.total_label.pack(anchor=tk.W)
        self.status_label = tk.Label(side_frame, text="", fg='gray')
        self.status_label.pack(fill=tk.X)
        self._result_ids: List[int] = []

        # Pointer bindings; right button and Space+left pan the view.
        self.canvas.bind("<ButtonPress-1>", lambda e: self.on_press(e, BUTTON_LEFT))
        self.canvas.bind("<ButtonPress-3>", lambda e: self.on_press(e, BUTTON_RIGHT))
        self.canvas.bind("<B1-Motion>", self.on_motion)
        self.canvas.bind("<B3-Motion>", self.on_motion)
        self.canvas.bind("<ButtonRelease-1>", lambda e: self.session.pointer_up())
        self.canvas.bind("<ButtonRelease-3>", lambda e: self.session.pointer_up())
        self.canvas.bind("<Double-Button-1>", self.on_double_click)
        self.canvas.bind("<MouseWheel>", self.on_wheel)
        self.canvas.bind("<Button-4>", lambda e: self.on_wheel(e, -WHEEL_NOTCH))
        self.canvas.bind("<Button-5>", lambda e: self.on_wheel(e, WHEEL_NOTCH))
        self.canvas.bind("<Configure>", lambda e: self.session.set_canvas_size(e.width, e.height))
        self.canvas.bind("<Enter>", lambda e: self.canvas.focus_set())
        self.canvas.bind("<FocusOut>", lambda e: self.session.cancel_interaction())
        # Keyboard (canvas focus, so typing in the entries is unaffected)
        self.canvas.bind("<KeyPress-space>", lambda e: self.session.key_space(True))
        self.canvas.bind("<KeyRelease-space>", lambda e: self.session.key_space(False))
        self.canvas.bind("<Escape>", lambda e: self.session.escape())
        self.canvas.bind("<Control-z>", lambda e: self.session.undo())
        self.canvas.bind("<Command-z>" if sys.platform == 'darwin' else "<Control-Z>", lambda e: self.session.undo())
        self.canvas.bind("<Prior>", lambda e: self.go_to_page(-1))
        self.canvas.bind("<Next>", lambda e: self.go_to_page(+1))
        self.canvas.bind("<Control-v>", lambda e: self.paste_image())

        self.session.subscribe(lambda s: self.schedule_redraw())
        self.schedule_redraw()

    # ----- Redraw (batched to one per idle cycle) -----
    def schedule_redraw(self) -> None:
        if self._redraw_pending:
            return
        self._redraw_pending = True
        self.root.after_idle(self.redraw)

    def redraw(self) -> None:
        self._redraw_pending = False
        self.painter.paint(build_commands(self.session))
        self.session.mark_clean()
        self.update_info_label()
        self.update_buttons_state()

    # ----- Pointer and wheel -----
    def on_press(self, event, button: int) -> None:
        self.canvas.focus_set()
        self.session.pointer_down(CanvasPoint(event.x, event.y), button, bool(event.state & SHIFT_MASK))

    def on_double_click(self, event) -> None:
        # Tk delivers the second press only as <Double-Button-1>.
        self.on_press(event, BUTTON_LEFT)
        self.session.double_click()

    def on_motion(self, event) -> None:
        self.session.pointer_move(CanvasPoint(event.x, event.y), bool(event.state & SHIFT_MASK))

    def on_wheel(self, event, delta: Optional[float] = None) -> None:
        if delta is None:
            # Windows reports 120 per notch, macOS small integers; wheel down is negative.
            step = event.delta / 120.0 if abs(event.delta) >= 120 else float(event.delta)
            delta = -step * WHEEL_NOTCH
        state = event.state
        zoom_modifier = bool(state & (ALT_MASK_X11 | ALT_MASK_WIN | CONTROL_MASK))
        if state & SHIFT_MASK and not zoom_modifier:
            self.session.wheel(CanvasPoint(event.x, event.y), delta, 0.0, False)
        else:
            self.session.wheel(CanvasPoint(event.x, event.y), 0.0, delta, zoom_modifier)

    # ----- Files -----
    def load_plan(self) -> None:
        path = filedialog.askopenfilename(
            title="Select Plan",
            filetypes=[("Plans", "*.pdf *.png *.jpg *.jpeg *.bmp *.tif *.tiff *.webp"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            plan = facade.file_load_plan(
                path,
                target_max=self.config['pdf_target_max_px'],
                max_scale=self.config['pdf_max_scale'],
            )
        except (OSError, ValueError) as e:
            logger.warning("Failed to load %s: %s", path, e)
            messagebox.showerror("Error", f"Failed to load plan: {e}")
            return
        self.show_plan(plan)

    def show_plan(self, plan: LoadedPlan) -> None:
        self.plan = plan
        self.painter.set_image(plan.image)
        self.real_length_var.set("")
        self.session.load_image(plan.image.width, plan.image.height, plan.name, plan.page_number, plan.page_count)
        self.page_label.config(text=f"Page {plan.page_number}/{plan.page_count}" if plan.is_pdf else "")

    def go_to_page(self, step: int) -> None:
        if self.plan is None or not self.plan.is_pdf:
            return
        target = self.plan.page_number + step
        if target < 1 or target > self.plan.page_count:
            return
        try:
            plan = facade.file_load_page(
                self.plan,
                target,
                target_max=self.config['pdf_target_max_px'],
                max_scale=self.config['pdf_max_scale'],
            )
        except (OSError, ValueError) as e:
            logger.warning("Failed to open page %s: %s", target, e)
            messagebox.showerror("Error", f"Failed to open PDF page: {e}")
            return
        self.show_plan(plan)

    def paste_image(self) -> None:
        try:
            grabbed = ImageGrab.grabclipboard()
        except (OSError, NotImplementedError) as e:
            logger.warning("Clipboard grab failed: %s", e)
            return
        if not isinstance(grabbed, Image.Image):
            return
        self.show_plan(LoadedPlan(image=grabbed.convert('RGB'), name="Screenshot", path=None))

    def reset_all(self) -> None:
        self.plan = None
        self.painter.set_image(None)
        self.real_length_var.set("")
        self.manual_area_var.set("")
        self.page_label.config(text="")
        self.session.reset_all()

    def load_config(self) -> None:
        path = filedialog.askopenfilename(title="Select Config JSON", filetypes=[("JSON files", "*.json")])
        if not path:
            return
        try:
            cfg = facade.file_load_config(path)
        except (OSError, ValueError) as e:
            messagebox.showerror("Error", f"Failed to load configuration: {e}")
            return
        self.config.clear()
        self.config.update(cfg)
        self.session.results.duplicate_window_s = float(cfg['duplicate_window_s'])
        self.schedule_redraw()
        messagebox.showinfo("Config", "Configuration loaded.")

    def save_config(self) -> None:
        path = filedialog.asksaveasfilename(title="Save Config", defaultextension='.json', filetypes=[("JSON files", "*.json")])
        if not path:
            return
        try:
            facade.file_save_config(self.config, path)
            messagebox.showinfo("Config", "Configuration saved.")
        except OSError as e:
            messagebox.showerror("Error", f"Failed to save configuration: {e}")

    # ----- Form actions -----
    def _on_mode(self) -> None:
        self.session.set_mode(self.mode_var.get())

    def reset_scale(self) -> None:
        self.real_length_var.set("")
        self.session.reset_scale()

    def save_area(self) -> None:
        card = self.session.save_current()
        if card is None:
            self.show_status_message("Nothing to save")
            return
        self.manual_area_var.set("")
        self.refresh_results()

    def remove_selected_result(self) -> None:
        sel = self.results_list.curselection()
        if not sel:
            return
        self.session.remove_result(self._result_ids[sel[0]])
        self.refresh_results()

    def refresh_results(self) -> None:
        self.results_list.delete(0, tk.END)
        self._result_ids = []
        for r in self.session.results.results:
            self.results_list.insert(tk.END, f"{r.name}: {r.area_m2} m²")
            self._result_ids.append(r.id)
        self.total_label.config(text=f"Total: {self.session.results.total_area_rounded} m²")

    def show_status_message(self, msg: str, duration_ms: int = 1200) -> None:
        """Show a transient status message in the side panel."""
        self.status_label.config(text=msg)
        if duration_ms > 0:
            self.root.after(duration_ms, lambda: self.status_label.config(text=""))

    # ----- Labels and buttons -----
    def update_buttons_state(self) -> None:
        s = self.session
        self.close_btn.config(state=tk.NORMAL if s.can_close else tk.DISABLED)
        self.undo_btn.config(state=tk.NORMAL if s.can_undo else tk.DISABLED)
        self.save_btn.config(state=tk.NORMAL if s.can_save else tk.DISABLED)
        pdf = self.plan is not None and self.plan.is_pdf
        self.prev_page_btn.config(state=tk.NORMAL if pdf and self.plan.page_number > 1 else tk.DISABLED)
        self.next_page_btn.config(state=tk.NORMAL if pdf and self.plan.page_number < self.plan.page_count else tk.DISABLED)

    def update_info_label(self) -> None:
        s = self.session
        cal = s.calibration
        if s.mm_per_pixel > 0:
            self.scale_label.config(text=f"Scale: {s.mm_per_pixel:.3f} mm/px\nLine: {cal.pixel_distance:.1f} px")
        elif cal.is_complete:
            self.scale_label.config(text=f"Line: {cal.pixel_distance:.1f} px\nEnter its real length")
        else:
            self.scale_label.config(text=f"Scale: not set ({s.calibration_point_count}/2 points)")
        area = s.area()
        state = "closed" if s.is_closed else "open"
        info = [
            f"Vertices: {s.vertex_count} ({state})",
            f"Area: {area.physical_area:.2f} m²" if area.physical_area > 0 else f"Area: {area.pixel_area:.0f} px²",
        ]
        if area.perimeter_m > 0:
            info.append(f"Perimeter: {area.perimeter_m:.2f} m")
        info.append(f"Result: {area.reported} m²" + (" (manual)" if area.uses_manual else ""))
        self.info_label.config(text="\n".join(info))


def main() -> None:
    level = os.environ.get("PLANAREA_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    if tk is None:
        raise RuntimeError("Tkinter is not available in this environment. Please run this script on a system with a graphical desktop and Tk installed.")
    root = tk.Tk()
    MeasureAppGUI(root)
    root.mainloop()


if __name__ == '__main__':
    main()
