"""Welford streaming statistics."""
import numpy as np
import pytest

from calibration_system.stats import RunningStats, mean_and_variance


class TestRunningStats:

    def test_textbook_values(self):
        stats = RunningStats()
        stats.extend([2, 4, 4, 4, 5, 5, 7, 9])
        assert stats.n == 8
        assert stats.mean == pytest.approx(5.0)
        assert stats.variance == pytest.approx(32 / 7)
        assert stats.min == 2 and stats.max == 9

    def test_matches_numpy(self, rng):
        x = rng.normal(2600.0, 70.0, size=5000)
        stats = RunningStats()
        stats.extend(x)
        assert stats.mean == pytest.approx(np.mean(x), rel=1e-12)
        assert stats.variance == pytest.approx(np.var(x, ddof=1), rel=1e-9)
        assert stats.std == pytest.approx(np.std(x, ddof=1), rel=1e-9)

    def test_single_sample_has_zero_variance(self):
        stats = RunningStats()
        stats.push(3.5)
        assert stats.mean == 3.5
        assert stats.variance == 0.0

    def test_constant_samples(self):
        stats = RunningStats()
        stats.extend([1.25] * 100)
        assert stats.mean == 1.25
        assert stats.variance == 0.0


class TestMeanAndVariance:

    def test_returns_pair(self):
        mv = mean_and_variance([1.0, 2.0, 3.0])
        assert mv.mean == pytest.approx(2.0)
        assert mv.variance == pytest.approx(1.0)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            mean_and_variance([])
