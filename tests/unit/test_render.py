import math

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pytest
from matplotlib.collections import PolyCollection
from matplotlib.colors import to_hex
from matplotlib.patches import Rectangle

from climb_profile.errors import PreconditionError
from climb_profile.gradient import CANONICAL_BANDS, classify
from climb_profile.models import Band, DerivedPoint, WindowAssignment
from climb_profile.render import LegendLayout, draw_legend, profile_polygons, render_profile

FLAT, GENTLE, MODERATE, STEEP, SEVERE = CANONICAL_BANDS


@pytest.fixture
def ax():
    fig, ax = plt.subplots()
    yield ax
    plt.close(fig)


@pytest.fixture
def derived():
    return (
        DerivedPoint(0.0, 100.0, math.nan),
        DerivedPoint(50.0, 105.0, 10.0),
        DerivedPoint(90.0, 95.0, -25.0),
        DerivedPoint(140.0, 97.0, 4.0),
    )


class TestProfilePolygons:
    def test_trapezoids_down_to_baseline(self, derived):
        windows = classify(derived, 1)
        shapes = profile_polygons(derived, windows)

        assert len(shapes) == 3
        polygon, _ = shapes[0]
        assert polygon == [(0.0, 0.0), (50.0, 0.0), (50.0, 105.0), (0.0, 100.0)]
        polygon, _ = shapes[2]
        assert polygon == [(90.0, 0.0), (140.0, 0.0), (140.0, 97.0), (90.0, 95.0)]

    def test_pair_takes_color_of_later_index(self, derived):
        windows = classify(derived, 1)
        colors = [color for _, color in profile_polygons(derived, windows)]
        assert colors == [STEEP.color, FLAT.color, GENTLE.color]

    def test_window_color_spans_its_segments(self, derived):
        windows = classify(derived, 2)  # [1,3) avg -7.5, [3,4) avg 4
        colors = [color for _, color in profile_polygons(derived, windows)]
        assert colors == [FLAT.color, FLAT.color, GENTLE.color]

    def test_custom_baseline(self, derived):
        shapes = profile_polygons(derived, classify(derived, 3), baseline=80.0)
        for polygon, _ in shapes:
            assert polygon[0][1] == 80.0
            assert polygon[1][1] == 80.0

    def test_zero_length_segment_is_skipped(self):
        derived = (
            DerivedPoint(0.0, 100.0, math.nan),
            DerivedPoint(0.0, 100.0, 0.0),
            DerivedPoint(100.0, 105.0, 5.0),
        )
        shapes = profile_polygons(derived, classify(derived, 1))
        assert len(shapes) == 1
        polygon, color = shapes[0]
        assert polygon[0][0] < polygon[1][0]
        assert color == MODERATE.color

    def test_missing_elevation_is_skipped(self):
        derived = (
            DerivedPoint(0.0, 100.0, math.nan),
            DerivedPoint(100.0, math.nan, math.nan),
            DerivedPoint(200.0, 110.0, math.nan),
            DerivedPoint(300.0, 112.0, 2.0),
        )
        shapes = profile_polygons(derived, classify(derived, 1))
        assert len(shapes) == 1
        assert shapes[0][0][0][0] == 200.0

    def test_accepts_plain_tuples(self):
        derived = [(0.0, 10.0, math.nan), (10.0, 11.0, 10.0)]
        windows = (WindowAssignment(1, 2, 10.0, STEEP),)
        shapes = profile_polygons(derived, windows)
        assert shapes[0] == ([(0.0, 0.0), (10.0, 0.0), (10.0, 11.0), (0.0, 10.0)], STEEP.color)

    def test_idempotent(self, derived):
        windows = classify(derived, 2)
        assert profile_polygons(derived, windows) == profile_polygons(derived, windows)


class TestPreconditions:
    def test_single_point(self):
        derived = (DerivedPoint(0.0, 100.0, math.nan),)
        with pytest.raises(PreconditionError):
            profile_polygons(derived, classify(derived, 1))

    def test_no_assignments(self, derived):
        with pytest.raises(PreconditionError):
            profile_polygons(derived, ())

    def test_assignments_short_of_the_end(self, derived):
        windows = classify(derived, 1)[:-1]
        with pytest.raises(PreconditionError):
            profile_polygons(derived, windows)

    def test_gap_between_assignments(self, derived):
        windows = classify(derived, 1)
        with pytest.raises(PreconditionError):
            profile_polygons(derived, (windows[0], windows[2]))

    def test_assignments_must_start_after_origin(self, derived):
        windows = (WindowAssignment(0, 4, 1.0, FLAT),)
        with pytest.raises(PreconditionError):
            profile_polygons(derived, windows)


class TestRenderProfile:
    def test_adds_one_collection(self, ax, derived):
        windows = classify(derived, 1)
        render_profile(ax, derived, windows)

        assert len(ax.collections) == 1
        coll = ax.collections[0]
        assert isinstance(coll, PolyCollection)
        assert len(coll.get_paths()) == 3
        faces = [to_hex(c) for c in coll.get_facecolors()]
        edges = [to_hex(c) for c in coll.get_edgecolors()]
        assert faces == [STEEP.color, FLAT.color, GENTLE.color]
        assert edges == faces
        assert coll.get_clip_on()

    def test_render_twice_is_identical(self, ax, derived):
        windows = classify(derived, 2)
        render_profile(ax, derived, windows)
        render_profile(ax, derived, windows)

        first, second = ax.collections
        assert [p.vertices.tolist() for p in first.get_paths()] == \
            [p.vertices.tolist() for p in second.get_paths()]
        assert first.get_facecolors().tolist() == second.get_facecolors().tolist()

    def test_inputs_unchanged(self, ax, derived):
        windows = classify(derived, 2)
        derived_before, windows_before = list(derived), list(windows)
        render_profile(ax, derived, windows)
        assert list(windows) == windows_before
        assert list(derived)[1:] == derived_before[1:]

    def test_precondition_failure_draws_nothing(self, ax):
        derived = (DerivedPoint(0.0, 100.0, math.nan),)
        with pytest.raises(PreconditionError):
            render_profile(ax, derived, ())
        assert len(ax.collections) == 0


class TestDrawLegend:
    def test_one_swatch_and_label_per_band(self, ax):
        draw_legend(ax, CANONICAL_BANDS)

        swatches = [p for p in ax.patches if isinstance(p, Rectangle)]
        assert len(swatches) == 5
        assert [to_hex(s.get_facecolor()) for s in swatches] == [b.color for b in CANONICAL_BANDS]
        assert [t.get_text() for t in ax.texts] == ["< 2%", "2 - 5%", "5 - 10%", "10 - 15%", "> 15%"]

    def test_swatches_stack_without_gaps(self, ax):
        layout = LegendLayout(y=0.5, swatch_height=0.05)
        draw_legend(ax, CANONICAL_BANDS, layout)

        swatches = ax.patches
        for lower, upper in zip(swatches, swatches[1:]):
            assert upper.get_y() == pytest.approx(lower.get_y() + lower.get_height())
        assert swatches[0].get_y() == pytest.approx(0.5)

    def test_default_legend_sits_right_of_the_plot(self, ax):
        ax.set_xlim(0, 20000)
        ax.set_ylim(0, 2000)
        draw_legend(ax, CANONICAL_BANDS)
        for swatch in ax.patches:
            assert swatch.get_data_transform() is ax.transAxes
            assert swatch.get_x() >= 1.0
            assert 0.0 <= swatch.get_y() <= 1.0

    def test_many_bands_fit_within_axes_height(self, ax):
        bands = [Band(float(k), float(k + 1), '#ffffff') for k in range(10)]
        draw_legend(ax, bands)

        swatches = ax.patches
        assert len(swatches) == 10
        top = swatches[-1].get_y() + swatches[-1].get_height()
        assert top <= 1.0 + 1e-9
        for lower, upper in zip(swatches, swatches[1:]):
            assert upper.get_y() == pytest.approx(lower.get_y() + lower.get_height())

    def test_no_bands_draws_nothing(self, ax):
        draw_legend(ax, [])
        assert len(ax.patches) == 0
        assert len(ax.texts) == 0
