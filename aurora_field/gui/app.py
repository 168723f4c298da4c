"""Interactive Tk viewer: pan/zoom map, hemisphere switch and a sample-budget slider.

Downsampling runs on the :class:`RecomputeScheduler` worker thread; every
other step, including re-projecting circles after a pan, zoom or resize,
runs on the Tk main loop.
"""

from __future__ import annotations

import threading
import tkinter as tk
from tkinter import ttk

import numpy as np
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg, NavigationToolbar2Tk

from aurora_field.config import load_settings
from aurora_field.constants import EARTH_RADIUS_M
from aurora_field.debug_utils import debug_print, enable_numba_logging
from aurora_field.field.analysis import max_probability_near, summarize, visibility_at
from aurora_field.field.types import DownsampledField, Hemisphere
from aurora_field.io.feed import FeedError, load_forecast
from aurora_field.render.figure import add_probability_legend, style_map_axes
from aurora_field.render.projection import AxesViewTransform, mercator_latitude
from aurora_field.render.renderer import FieldRenderer, MatplotlibSurface
from aurora_field.scheduler import RecomputeScheduler

from .controllers import build_initial_state
from .plotting import setup_figure
from .sliders import create_slider
from .views import create_hemisphere_selector, create_root_window, create_status_bar

UPDATE_DELAY_MS = 200
MIN_TARGET_COUNT = 500
MAX_TARGET_COUNT = 50_000
TARGET_STEP = 500


class AuroraViewer:
    def __init__(self, root: tk.Tk, *, feed: str | None = None):
        self.root = root
        self.pipeline, self.render_settings = load_settings()
        self.state = build_initial_state(self.pipeline, feed=feed)
        self.renderer = FieldRenderer.from_settings(self.render_settings)
        self.scheduler = RecomputeScheduler(
            min_probability=self.pipeline.min_probability,
            compute_kwargs=self.pipeline.compute_kwargs(),
        )
        self._unsubscribe = self.scheduler.slot.subscribe(self._on_field_published)
        self._update_pending = None
        self._redraw_pending = None

        controls = ttk.Frame(root, padding=5)
        controls.pack(side=tk.LEFT, fill=tk.Y)
        plot_frame = ttk.Frame(root)
        plot_frame.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True)

        self.fig, self.ax = setup_figure(
            self.render_settings.width_px,
            self.render_settings.height_px,
            self.render_settings.background,
        )
        self.canvas = FigureCanvasTkAgg(self.fig, master=plot_frame)
        self.toolbar = NavigationToolbar2Tk(self.canvas, plot_frame)
        self.toolbar.update()
        self.canvas.get_tk_widget().pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self.canvas.mpl_connect("resize_event", self._on_resize)
        self.canvas.mpl_connect("button_press_event", self._on_click)

        self.status = create_status_bar(root)
        create_hemisphere_selector(controls, self.state.hemisphere, self.set_hemisphere)
        self.target_var, _ = create_slider(
            "Samples per hemisphere",
            MIN_TARGET_COUNT,
            MAX_TARGET_COUNT,
            min(max(self.state.target_count, MIN_TARGET_COUNT), MAX_TARGET_COUNT),
            TARGET_STEP,
            controls,
            self.schedule_update,
        )
        ttk.Button(controls, text="Reload feed", command=self.reload_feed).pack(pady=10, fill=tk.X)

        self.surface = MatplotlibSurface(self.ax)
        self._reset_axes()
        root.protocol("WM_DELETE_WINDOW", self.close)

    # Axes and drawing -------------------------------------------------
    def _reset_axes(self) -> None:
        self.ax.clear()
        self.surface = MatplotlibSurface(self.ax)
        width, height = self.canvas.get_width_height()
        style_map_axes(
            self.ax,
            self.state.hemisphere,
            width_px=width,
            height_px=height,
            background=self.render_settings.background,
        )
        add_probability_legend(self.ax, stops=self.renderer.stops)
        # Axes.clear() drops limit callbacks, so they are connected again here.
        self.ax.callbacks.connect("xlim_changed", self._on_view_changed)
        self.ax.callbacks.connect("ylim_changed", self._on_view_changed)
        self.redraw()

    def redraw(self) -> None:
        field = self.scheduler.latest
        samples = field.for_hemisphere(self.state.hemisphere) if field is not None else ()
        drawn = self.renderer.draw(samples, AxesViewTransform(self.ax), self.surface)
        debug_print(f"viewer: drew {drawn} of {len(samples)} circles")
        self.canvas.draw_idle()

    def _on_view_changed(self, _ax) -> None:
        # One pan step changes both limits; redraw once per idle cycle.
        if self._redraw_pending is None:
            self._redraw_pending = self.root.after_idle(self._redraw_view)

    def _redraw_view(self) -> None:
        self._redraw_pending = None
        self.redraw()

    def _on_resize(self, event) -> None:
        x0, x1 = self.ax.get_xlim()
        y0, y1 = self.ax.get_ylim()
        if event.width <= 0:
            return
        center = (y0 + y1) / 2.0
        half = abs(x1 - x0) * event.height / event.width / 2.0
        self.ax.set_ylim(center - half, center + half)

    def _on_click(self, event) -> None:
        if event.inaxes is not self.ax or self.toolbar.mode or event.xdata is None:
            return
        field = self.scheduler.latest
        if field is None:
            return
        lon = float(np.degrees(event.xdata / EARTH_RADIUS_M))
        lat = float(mercator_latitude(event.ydata))
        samples = field.for_hemisphere(self.state.hemisphere)
        intensity = visibility_at(lat, lon, samples)
        peak = max_probability_near(lat, samples)
        self.status.set(
            f"{lat:.1f}, {lon:.1f}: {intensity.description} "
            f"(peak {peak:.0f}% at this latitude)"
        )

    # Controls ---------------------------------------------------------
    def set_hemisphere(self, hemisphere: Hemisphere) -> None:
        if hemisphere is self.state.hemisphere:
            return
        self.state.hemisphere = hemisphere
        self._reset_axes()
        self._show_summary(self.scheduler.latest)

    def schedule_update(self) -> None:
        if self._update_pending is not None:
            self.root.after_cancel(self._update_pending)
        self._update_pending = self.root.after(UPDATE_DELAY_MS, self._request_recompute)

    def _request_recompute(self) -> None:
        self._update_pending = None
        self.state.target_count = int(self.target_var.get())
        if not self.state.raw_entries:
            return
        self.scheduler.request(self.state.raw_entries, self.state.target_count)
        self.status.set(f"Resampling to {self.state.target_count} points per hemisphere...")

    def reload_feed(self) -> None:
        if self.state.loading:
            return
        self.state.loading = True
        self.status.set("Fetching aurora forecast...")

        def worker():
            try:
                forecast = load_forecast(self.state.feed_source)
            except FeedError as exc:
                message = str(exc)
                self.root.after(0, lambda: self._on_feed_failed(message))
                return
            self.root.after(0, lambda: self._on_feed_loaded(forecast))

        threading.Thread(target=worker, daemon=True).start()

    def _on_feed_loaded(self, forecast) -> None:
        self.state.loading = False
        self.state.forecast = forecast
        self.state.raw_entries = list(forecast.coordinates)
        self.root.title(f"Aurora Forecast - {forecast.forecast_time}")
        self._request_recompute()

    def _on_feed_failed(self, message: str) -> None:
        self.state.loading = False
        self.status.set(f"Feed error: {message}")

    # Scheduler results --------------------------------------------------
    def _on_field_published(self, field: DownsampledField) -> None:
        # Called on the scheduler thread.
        self.root.after(0, lambda: self._apply_field(field))

    def _apply_field(self, field: DownsampledField) -> None:
        if self.scheduler.latest is not field:
            return
        self.redraw()
        self._show_summary(field)

    def _show_summary(self, field: DownsampledField | None) -> None:
        if field is None:
            return
        hemisphere = self.state.hemisphere
        summary = summarize(
            field.for_hemisphere(hemisphere), hemisphere, self.state.visibility_threshold
        )
        visible = (
            f"visible down to {summary.visibility_latitude} deg"
            if summary.visibility_latitude is not None
            else "no widely visible aurora"
        )
        observed = self.state.forecast.observation_time if self.state.forecast else ""
        self.status.set(
            f"{hemisphere.value}: {summary.count} points, max {summary.max_probability:.0f}%, "
            f"{visible}. Observed {observed}"
        )

    def close(self) -> None:
        if self._redraw_pending is not None:
            self.root.after_cancel(self._redraw_pending)
        self._unsubscribe()
        self.scheduler.shutdown(timeout=1.0)
        self.root.destroy()


def main(*, feed: str | None = None) -> None:
    enable_numba_logging()
    root = create_root_window("Aurora Forecast")
    viewer = AuroraViewer(root, feed=feed)
    root.after(0, viewer.reload_feed)
    root.mainloop()


if __name__ == "__main__":
    main()
