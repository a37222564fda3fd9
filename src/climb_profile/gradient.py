"""Gradient bands and windowed-average classification.

The profile is cut into windows of consecutive sample indices (not distance).
Each window's mean gradient picks one band, and that band's color fills every
segment ending inside the window.
"""

import logging
import math
from collections.abc import Sequence

from climb_profile.models import Band, DerivedPoint, WindowAssignment

logger = logging.getLogger(__name__)

# Band colors, flattest to steepest
FLAT_COLOR = '#ffea84'
GENTLE_COLOR = '#ffd384'
MODERATE_COLOR = '#ffb684'
STEEP_COLOR = '#ff9f84'
SEVERE_COLOR = '#ff8484'

CANONICAL_BANDS = (
    Band(-math.inf, 2.0, FLAT_COLOR),
    Band(2.0, 5.0, GENTLE_COLOR),
    Band(5.0, 10.0, MODERATE_COLOR),
    Band(10.0, 15.0, STEEP_COLOR),
    Band(15.0, math.inf, SEVERE_COLOR),
)

# Default window is this many indices per 100 track points
WINDOW_POINTS_PER_HUNDRED = 5


def default_window_width(n_points: int) -> int:
    """Window width used when none is configured: 5 indices per 100 points, at least 1."""
    return max(1, n_points // 100 * WINDOW_POINTS_PER_HUNDRED)


def validate_bands(bands: Sequence[Band]) -> None:
    """Check that bands are ordered, non-empty ranges with no gaps or overlaps.

    Raises:
        ValueError: If the bands do not form a contiguous partition.
    """
    if not bands:
        raise ValueError("At least one gradient band is required")
    for band in bands:
        if math.isnan(band.low) or math.isnan(band.high) or not band.low < band.high:
            raise ValueError(f"Invalid band range [{band.low}, {band.high})")
    for lower, upper in zip(bands, bands[1:]):
        if lower.high != upper.low:
            raise ValueError(
                f"Bands must be contiguous: [{lower.low}, {lower.high}) "
                f"is followed by [{upper.low}, {upper.high})"
            )


def select_band(gradient: float, bands: Sequence[Band] = CANONICAL_BANDS) -> Band:
    """Map a gradient (percent) to its band.

    NaN and anything below the lowest band go to the first (flat) band;
    anything at or above the highest band's lower bound goes to the last.
    """
    if math.isnan(gradient) or gradient < bands[0].low:
        return bands[0]
    if gradient >= bands[-1].low:
        return bands[-1]
    for band in bands:
        if band.contains(gradient):
            return band
    return bands[0]


def window_ranges(n_points: int, window_width: int) -> list[tuple[int, int]]:
    """Half-open index ranges partitioning 1..n_points-1.

    All windows hold exactly window_width indices except possibly the last,
    which holds the remainder.
    """
    ranges = []
    for start in range(1, n_points, window_width):
        ranges.append((start, min(start + window_width, n_points)))
    return ranges


def classify(
    derived: Sequence[DerivedPoint],
    window_width: int,
    bands: Sequence[Band] = CANONICAL_BANDS,
) -> tuple[WindowAssignment, ...]:
    """Assign a band to each window of the derived sequence.

    Index 0 has no gradient and is never part of a window. Each window's
    average divides by its own length, so a short remainder window is not
    diluted.

    Raises:
        ValueError: If window_width is not a positive integer or bands are invalid.
    """
    if isinstance(window_width, bool) or not isinstance(window_width, int) or window_width < 1:
        raise ValueError(f"Window width must be a positive integer, got {window_width!r}")
    validate_bands(bands)

    assignments = []
    for start, end in window_ranges(len(derived), window_width):
        count = end - start
        total = sum(derived[i].gradient for i in range(start, end))
        average = total / count
        assignments.append(WindowAssignment(start, end, average, select_band(average, bands)))

    logger.debug(
        "Classified %d points into %d windows of width %d",
        len(derived), len(assignments), window_width,
    )
    return tuple(assignments)
