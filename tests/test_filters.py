"""
Tests for post-generation filters.
"""

import pytest
import numpy as np
from py_terrain.core import ShapeMismatchError, TerrainOptions, make_vertex_grid
from py_terrain.core.filters import (
    clamp, turbulence, step, smooth, smooth_median, smooth_conservative, normalize_terrain,
)


@pytest.fixture
def options():
    """Create test terrain options."""
    return TerrainOptions(width_segments=2, height_segments=2, min_height=-10, max_height=10)


@pytest.fixture
def spike(options):
    """A 3x3 grid with a single raised centre vertex."""
    vertices = make_vertex_grid(options)
    vertices[4, 2] = 9.0
    return vertices


class TestClamp:
    """Test rescaling into the height range."""

    def test_stretch_fills_range(self, options):
        """Test that stretching maps the extremes onto the range ends."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(3, 5, 9)

        clamp(vertices, options)

        assert vertices[:, 2].min() == pytest.approx(-10)
        assert vertices[:, 2].max() == pytest.approx(10)
        np.testing.assert_allclose(vertices[:, 2], np.linspace(-10, 10, 9))

    def test_no_stretch_keeps_fitting_terrain(self, options):
        """Test that terrain inside the range is unchanged without stretch."""
        options = options.replace(stretch=False)
        vertices = make_vertex_grid(options)
        heights = np.linspace(-4, 6, 9)
        vertices[:, 2] = heights

        clamp(vertices, options)

        np.testing.assert_allclose(vertices[:, 2], heights)

    def test_no_stretch_squeezes_overflow(self, options):
        """Test that terrain beyond the range is squeezed into it."""
        options = options.replace(stretch=False)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(0, 40, 9)

        clamp(vertices, options)

        assert vertices[:, 2].min() == pytest.approx(0)
        assert vertices[:, 2].max() == pytest.approx(10)

    def test_idempotent(self, options):
        """Test that clamping twice equals clamping once."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = [5, -30, 12, 0, 7, 7, 1, 99, -2]

        clamp(vertices, options)
        once = vertices[:, 2].copy()
        clamp(vertices, options)

        np.testing.assert_allclose(vertices[:, 2], once, atol=1e-9)

    def test_easing_applied(self, options):
        """Test that heights pass through the easing curve."""
        options = options.replace(easing="EaseIn", min_height=0, max_height=100)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(0, 1, 9)

        clamp(vertices, options)

        np.testing.assert_allclose(vertices[:, 2], np.linspace(0, 1, 9) ** 2 * 100)

    @pytest.mark.parametrize("low, high", [(20, 30), (-45, -15)])
    def test_no_stretch_outside_range(self, options, low, high):
        """Test that terrain wholly outside the range is squeezed onto it."""
        options = options.replace(stretch=False)
        vertices = make_vertex_grid(options)
        heights = np.linspace(low, high, 9)
        vertices[:, 2] = heights

        clamp(vertices, options)

        np.testing.assert_allclose(vertices[:, 2], np.linspace(-10, 10, 9))
        # ordering is preserved, not inverted
        assert np.all(np.diff(vertices[:, 2]) > 0)

    def test_no_stretch_touching_range(self, options):
        """Test terrain that only touches the top of the range keeps its relief."""
        options = options.replace(stretch=False)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(10, 50, 9)

        clamp(vertices, options)

        assert vertices[:, 2].min() == pytest.approx(-10)
        assert vertices[:, 2].max() == pytest.approx(10)

    def test_flat_terrain(self, options):
        """Test that a flat grid is mapped to the bottom of the range."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = 3.0

        clamp(vertices, options)

        assert np.all(np.isfinite(vertices[:, 2]))
        np.testing.assert_allclose(vertices[:, 2], -10)


class TestTurbulence:
    """Test folding about the middle of the range."""

    def test_fold(self, options):
        """Test hand-computed folds on [-10, 10]."""
        vertices = make_vertex_grid(options)
        vertices[:4, 2] = [0, 10, -10, 5]

        turbulence(vertices, options)

        np.testing.assert_allclose(vertices[:4, 2], [-10, 10, 10, 0])

    def test_stays_in_range(self, options):
        """Test that in-range heights stay in range."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(-10, 10, 9)

        turbulence(vertices, options)

        assert np.all(vertices[:, 2] >= -10)
        assert np.all(vertices[:, 2] <= 10)


class TestStep:
    """Test terracing."""

    def test_bucket_means(self, options):
        """Test that each vertex takes the mean of its bucket."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = [8, 0, 4, 2, 6, 1, 7, 3, 5]

        step(vertices, 3)

        expected = {0: 1, 1: 1, 2: 1, 3: 4, 4: 4, 5: 4, 6: 7, 7: 7, 8: 7}
        for original, value in zip([8, 0, 4, 2, 6, 1, 7, 3, 5], vertices[:, 2]):
            assert value == pytest.approx(expected[original])

    def test_remainder_goes_to_last_bucket(self, options):
        """Test that leftover vertices join the top terrace."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.arange(9, dtype=float)

        step(vertices, 4)

        # buckets of 2, 2, 2 and 3 vertices
        np.testing.assert_allclose(vertices[:, 2], [0.5, 0.5, 2.5, 2.5, 4.5, 4.5, 7, 7, 7])

    def test_at_most_levels_values(self, options):
        """Test that no more distinct heights than levels remain."""
        vertices = make_vertex_grid(options.replace(width_segments=9, height_segments=9))
        vertices[:, 2] = np.random.default_rng(3).normal(size=len(vertices))

        step(vertices, 5)

        assert len(np.unique(vertices[:, 2])) <= 5

    def test_default_levels(self):
        """Test the population-based default."""
        options = TerrainOptions(width_segments=9, height_segments=9)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.arange(100, dtype=float)

        # floor((100 / 2) ** 0.25) == 2
        step(vertices)

        assert len(np.unique(vertices[:, 2])) == 2

    def test_single_level_is_noop(self, options):
        """Test that one level leaves the terrain alone."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.arange(9, dtype=float)

        step(vertices, 1)

        np.testing.assert_array_equal(vertices[:, 2], np.arange(9))


class TestSmoothing:
    """Test neighbourhood smoothing filters."""

    @pytest.mark.parametrize("smoother", [smooth, smooth_median, smooth_conservative],
                             ids=lambda f: f.__name__)
    def test_grid_mismatch(self, smoother):
        """Test that a grid not matching the options is rejected."""
        options = TerrainOptions(width_segments=4, height_segments=4)
        with pytest.raises(ShapeMismatchError):
            smoother(np.zeros((9, 3)), options)

    def test_smooth_box_mean(self, options, spike):
        """Test the in-grid 3x3 mean."""
        smooth(spike, options)

        assert spike[4, 2] == pytest.approx(1.0)
        # corner averages itself and three neighbours
        assert spike[0, 2] == pytest.approx(2.25)
        # edge averages six vertices
        assert spike[1, 2] == pytest.approx(1.5)

    def test_smooth_weight(self, options, spike):
        """Test that weight keeps part of the original height."""
        smooth(spike, options, weight=1)

        assert spike[4, 2] == pytest.approx((1.0 + 9.0) / 2)

    def test_smooth_median(self, options, spike):
        """Test that an isolated spike is removed."""
        smooth_median(spike, options)

        np.testing.assert_allclose(spike[:, 2], 0)

    def test_smooth_median_keeps_plateau(self, options):
        """Test that a majority height survives."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = [5, 5, 5, 5, 5, 5, 0, 0, 0]

        smooth_median(vertices, options)

        assert vertices[1, 2] == pytest.approx(5)

    def test_smooth_conservative_spike(self, options, spike):
        """Test that a spike is pulled halfway to its highest neighbour."""
        smooth_conservative(spike, options)

        assert spike[4, 2] == pytest.approx(4.5)
        np.testing.assert_allclose(np.delete(spike[:, 2], 4), 0)

    def test_smooth_conservative_pit(self, options):
        """Test that a pit is raised towards its lowest neighbour."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = 4.0
        vertices[4, 2] = -4.0

        smooth_conservative(vertices, options, multiplier=3)

        assert vertices[4, 2] == pytest.approx((4.0 - 4.0 * 3) / 4)

    def test_smooth_conservative_keeps_slope(self, options):
        """Test that a terraced slope is untouched."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.repeat([0.0, 1.0, 2.0], 3)
        original = vertices.copy()

        smooth_conservative(vertices, options)

        np.testing.assert_allclose(vertices, original)


class TestNormalizeTerrain:
    """Test the normalization pipeline."""

    def test_grid_mismatch(self):
        """Test that nothing runs on a grid sized for other options."""
        calls = []
        options = TerrainOptions(width_segments=4, height_segments=4, turbulent=True,
                                 after=lambda v, o: calls.append(v))
        vertices = np.zeros((9, 3))
        vertices[:, 2] = np.arange(9, dtype=float)

        with pytest.raises(ShapeMismatchError):
            normalize_terrain(vertices, options)

        np.testing.assert_array_equal(vertices[:, 2], np.arange(9))
        assert calls == []

    def test_clamps_into_range(self, options):
        """Test that normalization keeps terrain in range."""
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(-300, 500, 9)

        normalize_terrain(vertices, options)

        assert vertices[:, 2].min() == pytest.approx(-10)
        assert vertices[:, 2].max() == pytest.approx(10)

    def test_after_hook_called(self, options):
        """Test that the hook receives the grid and options."""
        calls = []
        options = options.replace(after=lambda v, o: calls.append((v, o)))
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.arange(9, dtype=float)

        normalize_terrain(vertices, options)

        assert len(calls) == 1
        assert calls[0][0] is vertices
        assert calls[0][1] is options

    def test_after_hook_error_propagates(self, options):
        """Test that hook errors reach the caller with the clamp applied."""
        def failing(vertices, opts):
            raise RuntimeError("hook failed")

        options = options.replace(after=failing)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.linspace(0, 80, 9)

        with pytest.raises(RuntimeError, match="hook failed"):
            normalize_terrain(vertices, options)

        assert vertices[:, 2].max() == pytest.approx(10)

    def test_steps(self, options):
        """Test that terracing runs when steps are enabled."""
        options = TerrainOptions(width_segments=9, height_segments=9, min_height=0,
                                 max_height=1, steps=4)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = np.arange(100, dtype=float)

        normalize_terrain(vertices, options)

        assert vertices[:, 2].min() == pytest.approx(0)
        assert vertices[:, 2].max() == pytest.approx(1)

    def test_turbulent(self, options):
        """Test that turbulence folds before clamping."""
        options = options.replace(turbulent=True)
        vertices = make_vertex_grid(options)
        vertices[:, 2] = [-10, -5, 0, 5, 10, 0, 0, 0, 0]

        normalize_terrain(vertices, options)

        # folded: 10, 0, -10, 0, 10, -10...; middle band becomes the floor
        assert vertices[2, 2] == pytest.approx(-10)
        assert vertices[0, 2] == pytest.approx(10)
        assert vertices[4, 2] == pytest.approx(10)
