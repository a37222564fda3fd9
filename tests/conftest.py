import pytest

from climb_profile.models import TrackPoint


def make_track_points(elevations: list[float | None], spacing_m: float = 100.0) -> list[TrackPoint]:
    """Create track points with given elevations along a straight line."""
    base_lat, base_lon = 44.17, 5.28
    lat_delta = spacing_m / 111_000
    return [
        TrackPoint(lat=base_lat + i * lat_delta, lon=base_lon, elevation=elev)
        for i, elev in enumerate(elevations)
    ]


def segment_distances(*lengths: float):
    """A distance function returning the given segment lengths in order."""
    remaining = list(lengths)

    def distance_func(lat1, lon1, elev1, lat2, lon2, elev2, use_elevation):
        return remaining.pop(0)

    return distance_func


def write_gpx(path, points: list[TrackPoint]) -> str:
    trkpts = []
    for pt in points:
        ele = f"<ele>{pt.elevation}</ele>" if pt.elevation is not None else ""
        trkpts.append(f'<trkpt lat="{pt.lat}" lon="{pt.lon}">{ele}</trkpt>')
    path.write_text(
        '<?xml version="1.0"?>\n'
        '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">'
        f'<trk><trkseg>{"".join(trkpts)}</trkseg></trk></gpx>'
    )
    return str(path)


@pytest.fixture
def climb_points():
    """A 5 km climb with stretches of increasing steepness, ~100 m per point."""
    grades = [1.0] * 10 + [4.0] * 10 + [8.0] * 10 + [12.0] * 10 + [18.0] * 10
    elevations = [300.0]
    for g in grades:
        elevations.append(elevations[-1] + g)
    return make_track_points(elevations)


@pytest.fixture
def climb_gpx(tmp_path, climb_points):
    return write_gpx(tmp_path / "climb.gpx", climb_points)
