"""Elevation profile chart generation."""

import io
import logging
import os
import tempfile
from collections.abc import Sequence

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend, file output only
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import FuncFormatter, MultipleLocator

from climb_profile.config import ProfileSettings
from climb_profile.models import DerivedPoint, WindowAssignment
from climb_profile.render import LEGEND_MARGIN, draw_legend, render_profile

logger = logging.getLogger(__name__)

X_TICK_INTERVAL = 1000  # meters
Y_TICK_INTERVAL = 100  # meters
TITLE_FONT = {'family': 'serif', 'size': 26}
OUTLINE_COLOR = 'black'


def elevation_limit(derived: Sequence[DerivedPoint], y_max: float | None = None) -> float:
    """Top of the elevation axis: y_max if given, else 110% of the highest point."""
    if y_max is not None:
        return y_max
    elevations = np.array([pt.elevation for pt in derived], dtype=float)
    if np.all(np.isnan(elevations)):
        return 1.0
    top = float(np.nanmax(elevations)) * 1.1
    return top if top > 0 else 1.0


def _style_axes(ax, show_axes: bool) -> None:
    if not show_axes:
        ax.set_axis_off()
        return
    ax.xaxis.set_major_locator(MultipleLocator(X_TICK_INTERVAL))
    ax.yaxis.set_major_locator(MultipleLocator(Y_TICK_INTERVAL))
    ax.xaxis.set_major_formatter(FuncFormatter(lambda v, _: f"{round(v):.0f}"))
    ax.set_xlabel('Distance (m)', fontsize=10)
    ax.set_ylabel('Elevation (m)', fontsize=10)
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.grid(axis='y', alpha=0.3, linestyle='-', linewidth=0.5)


def generate_profile_chart(
    derived: Sequence[DerivedPoint],
    assignments: Sequence[WindowAssignment],
    settings: ProfileSettings = ProfileSettings(),
) -> bytes:
    """Generate the gradient-colored elevation profile.

    Args:
        derived: Derived profile sequence
        assignments: Window assignments covering the sequence
        settings: Figure size, title, axis limits, legend and bands

    Returns PNG image as bytes.

    Raises:
        PreconditionError: If the data cannot be drawn (fewer than 2 points,
            or windows not covering the sequence).
    """
    fig, ax = plt.subplots(figsize=(settings.fig_width, settings.fig_height), facecolor='white')
    try:
        render_profile(ax, derived, assignments)

        distances = [pt.distance for pt in derived]
        elevations = [pt.elevation for pt in derived]
        ax.plot(distances, elevations, color=OUTLINE_COLOR, linewidth=1.0)

        ax.set_xlim(0, distances[-1] if distances[-1] > 0 else 1.0)
        ax.set_ylim(0, elevation_limit(derived, settings.y_max))
        ax.set_title(settings.title, fontdict=TITLE_FONT, pad=20)
        _style_axes(ax, settings.show_axes)

        if settings.legend:
            fig.subplots_adjust(right=1.0 - LEGEND_MARGIN)
            draw_legend(ax, settings.bands)

        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=settings.dpi,
                    facecolor='white', edgecolor='none')
    finally:
        plt.close(fig)
    buf.seek(0)
    return buf.getvalue()


def save_profile_chart(path: str, png: bytes) -> None:
    """Write PNG bytes to path atomically; an existing file is only replaced on success."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(suffix=".png", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(png)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.info("Wrote: %s", path)
