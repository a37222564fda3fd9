"""Derive cumulative distance and gradient from raw track points."""

import logging
import math
from collections.abc import Callable, Sequence

from climb_profile.distance import distance_3d
from climb_profile.errors import InvalidInputError
from climb_profile.models import DerivedPoint, TrackPoint

logger = logging.getLogger(__name__)

DistanceFunc = Callable[[float, float, float | None, float, float, float | None, bool], float]


def _elevation(pt: TrackPoint) -> float:
    return pt.elevation if pt.elevation is not None else math.nan


def build_sequence(
    points: Sequence[TrackPoint], distance_func: DistanceFunc = distance_3d
) -> tuple[DerivedPoint, ...]:
    """Build the derived profile sequence for a track.

    The first point sits at distance 0 with a NaN gradient. Every later point
    adds the 3D length of the segment from its predecessor and carries that
    segment's gradient in percent:

        gradient[i] = (elevation[i] - elevation[i-1]) / segment * 100

    A zero-length segment (duplicate coordinate) gets a gradient of 0.
    A missing elevation becomes NaN, and so does any gradient touching it.

    Raises:
        InvalidInputError: If points is empty.
        GeodesyError: Propagated from distance_func for unmeasurable coordinates.
    """
    if not points:
        raise InvalidInputError("Track contains no points")

    first = points[0]
    derived = [DerivedPoint(0.0, _elevation(first), math.nan)]

    for i in range(1, len(points)):
        prev, curr = points[i - 1], points[i]
        segment = distance_func(
            prev.lat, prev.lon, prev.elevation,
            curr.lat, curr.lon, curr.elevation,
            True,
        )
        elev_prev = _elevation(prev)
        elev_curr = _elevation(curr)
        delta = elev_curr - elev_prev

        if segment > 0:
            gradient = delta / segment * 100
        elif math.isnan(delta):
            gradient = math.nan
        else:
            gradient = 0.0

        logger.debug(
            "point %d: elevation %.1f -> %.1f over %.2f m, gradient %.2f%%",
            i, elev_prev, elev_curr, segment, gradient,
        )
        derived.append(DerivedPoint(derived[-1].distance + segment, elev_curr, gradient))

    return tuple(derived)
