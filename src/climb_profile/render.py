"""Draw gradient-colored profile polygons and the band legend onto an Axes."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from matplotlib.collections import PolyCollection
from matplotlib.patches import Rectangle

from climb_profile.errors import PreconditionError
from climb_profile.models import Band, DerivedPoint, WindowAssignment

DEFAULT_EDGE_WIDTH = 0.5

# Figure fraction kept free right of the axes for the legend
LEGEND_MARGIN = 0.16

Polygon = list[tuple[float, float]]


@dataclass(frozen=True)
class LegendLayout:
    """Legend geometry in axes fractions, independent of the data limits.

    The default sits right of the axes (x > 1), in the margin reserved by
    LEGEND_MARGIN, so it never covers the profile.
    """
    x: float = 1.02  # left edge of the swatches
    y: float = 0.3  # bottom edge of the lowest swatch
    swatch_width: float = 0.04
    swatch_height: float = 0.08  # shrunk so the stack ends at or below the top of the axes
    label_gap: float = 0.01  # space between swatch and label
    fontsize: float = 12
    edge_color: str = '#333333'
    edge_width: float = DEFAULT_EDGE_WIDTH


def check_assignments(derived: Sequence[DerivedPoint], assignments: Sequence[WindowAssignment]) -> None:
    """Verify the windows cover indices 1..N-1 in order without gaps.

    Raises:
        PreconditionError: If there is nothing to draw or the windows do not line up.
    """
    n = len(derived)
    if n < 2:
        raise PreconditionError(f"At least 2 points are needed to draw a profile, got {n}")
    if not assignments:
        raise PreconditionError("No window assignments to draw")

    expected_start = 1
    for a in assignments:
        if a.start != expected_start or a.end <= a.start:
            raise PreconditionError(
                f"Window [{a.start}, {a.end}) does not continue from index {expected_start}"
            )
        expected_start = a.end
    if expected_start != n:
        raise PreconditionError(f"Windows end at index {expected_start}, expected {n}")


def profile_polygons(
    derived: Sequence[DerivedPoint],
    assignments: Sequence[WindowAssignment],
    baseline: float = 0.0,
) -> tuple[tuple[Polygon, str], ...]:
    """Build the trapezoid under the curve for each pair of consecutive points.

    The pair (i-1, i) takes the color of the window containing i. Pairs with
    no horizontal extent or a missing elevation are skipped.

    Returns a tuple of (polygon, color) in track order.
    """
    check_assignments(derived, assignments)

    shapes = []
    for window in assignments:
        for i in range(window.start, window.end):
            x0, e0 = derived[i - 1][0], derived[i - 1][1]
            x1, e1 = derived[i][0], derived[i][1]
            if x1 <= x0 or not (math.isfinite(e0) and math.isfinite(e1)):
                continue
            polygon = [(x0, baseline), (x1, baseline), (x1, e1), (x0, e0)]
            shapes.append((polygon, window.band.color))
    return tuple(shapes)


def render_profile(
    ax,
    derived: Sequence[DerivedPoint],
    assignments: Sequence[WindowAssignment],
    baseline: float = 0.0,
    edge_width: float = DEFAULT_EDGE_WIDTH,
) -> None:
    """Fill the area under the elevation curve, colored by window band.

    Each trapezoid is stroked in its own fill color so neighbors meet without
    seams. The collection is clipped to the axes.

    Args:
        ax: matplotlib Axes whose data coordinates are (distance m, elevation m)
        derived: Derived profile sequence (at least 2 points)
        assignments: Windows covering indices 1..N-1
        baseline: Elevation the trapezoids are dropped to
        edge_width: Outline width in points
    """
    shapes = profile_polygons(derived, assignments, baseline)
    polygons = [polygon for polygon, _ in shapes]
    colors = [color for _, color in shapes]

    coll = PolyCollection(polygons, facecolors=colors, edgecolors=colors, linewidths=edge_width)
    coll.set_clip_on(True)
    ax.add_collection(coll)


def draw_legend(ax, bands: Sequence[Band], layout: LegendLayout = LegendLayout()) -> None:
    """Draw one swatch and range label per band, flattest at the bottom.

    Swatches shrink when needed so the top of the stack stays within the
    axes height however many bands there are.
    """
    if not bands:
        return
    height = min(layout.swatch_height, (1.0 - layout.y) / len(bands))
    for k, band in enumerate(bands):
        bottom = layout.y + k * height
        ax.add_patch(Rectangle(
            (layout.x, bottom), layout.swatch_width, height,
            transform=ax.transAxes, facecolor=band.color,
            edgecolor=layout.edge_color, linewidth=layout.edge_width,
            clip_on=False, zorder=3,
        ))
        ax.text(
            layout.x + layout.swatch_width + layout.label_gap,
            bottom + height / 2,
            band.display_label,
            transform=ax.transAxes, fontsize=layout.fontsize,
            ha='left', va='center', zorder=3,
        )
