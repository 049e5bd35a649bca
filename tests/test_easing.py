"""
Tests for easing curves.
"""

import pytest
import numpy as np
from py_terrain.core.easing import EASINGS, get_easing, list_easings, ease_in_out, in_ease_out


class TestEasing:
    """Test easing curve shapes."""

    @pytest.mark.parametrize("name", sorted(EASINGS))
    def test_endpoints(self, name):
        """Test that every curve maps 0 to 0 and 1 to 1."""
        fn = get_easing(name)
        assert fn(0.0) == pytest.approx(0.0)
        assert fn(1.0) == pytest.approx(1.0)

    @pytest.mark.parametrize("name", sorted(EASINGS))
    def test_monotonic(self, name):
        """Test that every curve is non-decreasing on [0, 1]."""
        values = get_easing(name)(np.linspace(0, 1, 101))
        assert np.all(np.diff(values) >= -1e-12)

    def test_known_values(self):
        """Test a few hand-computed points."""
        assert get_easing("EaseIn")(0.5) == pytest.approx(0.25)
        assert get_easing("EaseOut")(0.5) == pytest.approx(0.75)
        assert ease_in_out(0.5) == pytest.approx(0.5)
        assert in_ease_out(0.25) == pytest.approx(0.4375)
        assert get_easing("EaseInStrong")(0.5) == pytest.approx(0.5 ** 7)
        assert get_easing("EaseInWeak")(0.5) == pytest.approx(0.5 ** 1.55)

    def test_unknown_name(self):
        """Test that unknown easing names are rejected."""
        with pytest.raises(KeyError, match="Available"):
            get_easing("Bounce")

    def test_list_easings(self):
        """Test the available names."""
        assert list_easings() == sorted(EASINGS)
        assert "Linear" in list_easings()
