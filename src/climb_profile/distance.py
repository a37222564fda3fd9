"""3D distance between track points.

Wraps gpxpy's geodesy: the surface distance between two lat/lon pairs
(equirectangular for short hops, Haversine for long ones) combined with the
elevation delta as a straight chord.
"""

import math

from gpxpy import geo

from climb_profile.errors import GeodesyError


def _valid_elevation(elev: float | None) -> bool:
    return elev is not None and not math.isnan(elev)


def _check_coordinate(lat: float, lon: float) -> None:
    if lat is None or lon is None or not (math.isfinite(lat) and math.isfinite(lon)):
        raise GeodesyError(f"Invalid coordinate: ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise GeodesyError(f"Coordinate out of range: ({lat}, {lon})")


def distance_3d(
    lat1: float, lon1: float, elev1: float | None,
    lat2: float, lon2: float, elev2: float | None,
    use_elevation: bool = True,
) -> float:
    """Distance in meters between two points, counting elevation as a third axis.

    Args:
        lat1, lon1, elev1: First point (degrees, degrees, meters or None)
        lat2, lon2, elev2: Second point
        use_elevation: If False, or if either elevation is missing, return the
            surface distance only.

    Raises:
        GeodesyError: If a latitude or longitude is missing, NaN or out of range.
    """
    _check_coordinate(lat1, lon1)
    _check_coordinate(lat2, lon2)

    if use_elevation and _valid_elevation(elev1) and _valid_elevation(elev2):
        return geo.distance(lat1, lon1, elev1, lat2, lon2, elev2)
    return geo.distance(lat1, lon1, None, lat2, lon2, None)
