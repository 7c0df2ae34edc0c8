"""Tests for the smoothed periodogram and dominant-period pick."""

import numpy as np
import pandas as pd
import pytest

from tidal_aquifer_analyzer.analysis.spectrum import (
    cosine_taper,
    dominant_period,
    longest_gap,
    modified_daniell_kernel,
    smoothed_periodogram,
    spectral_peak,
    spectral_peaks_per_well,
)


def _tidal_series(n=960, period_min=720.0, dt_min=15.0, noise=0.0, seed=0):
    t = np.arange(n) * dt_min
    x = 0.25 * np.sin(2.0 * np.pi * t / period_min) + 1e-4 * t
    if noise:
        x = x + np.random.default_rng(seed).normal(0.0, noise, n)
    return x


class TestKernelAndTaper:
    def test_modified_daniell_3_3(self):
        k = modified_daniell_kernel((3, 3))
        np.testing.assert_allclose(k, [0.0625, 0.25, 0.375, 0.25, 0.0625])
        assert k.sum() == pytest.approx(1.0)

    def test_span_below_two_is_identity(self):
        np.testing.assert_allclose(modified_daniell_kernel((1,)), [1.0])
        np.testing.assert_allclose(modified_daniell_kernel(()), [1.0])

    def test_cosine_taper_shape(self):
        w = cosine_taper(100, 0.1)
        assert w.shape == (100,)
        np.testing.assert_allclose(w[10:90], 1.0)
        np.testing.assert_allclose(w[:10], w[::-1][:10])
        assert 0.0 < w[0] < w[9] < 1.0

    def test_zero_taper_is_flat(self):
        np.testing.assert_allclose(cosine_taper(50, 0.0), 1.0)


class TestSmoothedPeriodogram:
    def test_frequency_grid(self):
        pg = smoothed_periodogram(_tidal_series(n=960))
        assert pg.n_samples == 960
        assert pg.frequency.size == 480
        assert pg.frequency[0] == pytest.approx(1.0 / 960)
        assert pg.frequency[-1] == pytest.approx(0.5)
        assert np.all(pg.spectrum >= 0)

    def test_non_finite_rejected(self):
        x = _tidal_series()
        x[3] = np.nan
        with pytest.raises(ValueError):
            smoothed_periodogram(x)

    def test_too_short_rejected(self):
        with pytest.raises(ValueError):
            smoothed_periodogram(np.ones(3))


class TestDominantPeriod:
    def test_semidiurnal_peak_found(self):
        # 10 days at 15 min: bin k=20 is exactly 720 min
        pk = spectral_peak(_tidal_series(noise=0.01), well_id="W1")
        assert pk.well_id == "W1"
        assert pk.period_minutes == pytest.approx(720.0)
        assert pk.frequency == pytest.approx(20.0 / 960.0)
        assert 650.0 <= pk.period_minutes <= 800.0
        assert pk.warnings == ()

    def test_band_edges_are_inclusive(self):
        pg = smoothed_periodogram(_tidal_series())
        p = 15.0 / pg.frequency[17]  # k=18, 800 min
        pk = dominant_period(pg, band_min=(p, p))
        assert pk.period_minutes == p
        assert pk.period_minutes == pytest.approx(800.0)

    def test_no_bin_in_band_raises(self):
        pg = smoothed_periodogram(_tidal_series(n=40))
        with pytest.raises(ValueError, match="no periodogram bin"):
            dominant_period(pg, band_min=(650.0, 800.0), well_id="short")

    def test_missing_samples_dropped_with_warning(self):
        x = _tidal_series()
        x[[5, 100, 500]] = np.nan
        pk = spectral_peak(x)
        assert any("3 missing samples" in w for w in pk.warnings)
        assert 650.0 <= pk.period_minutes <= 800.0
        assert not any("closed up" in w for w in pk.warnings)

    def test_contiguous_gap_reported(self):
        x = _tidal_series()
        x[300:340] = np.nan
        pk = spectral_peak(x, well_id="W1")
        assert "40 missing samples dropped before the periodogram" in pk.warnings
        assert any(w.startswith("gap of 40 samples (600 min) closed up") for w in pk.warnings)

    def test_longest_gap(self):
        assert longest_gap(np.array([False, True, True, False, True, True, True, False])) == 3
        assert longest_gap(np.zeros(5, dtype=bool)) == 0


def test_spectral_peaks_per_well_skips_excluded():
    times = pd.date_range("2023-06-01", periods=960, freq="15min", tz="UTC")
    series = {
        wid: pd.DataFrame({"well_id": wid, "time": times, "level_m": _tidal_series(seed=i, noise=0.01), "tide_m": 0.0})
        for i, wid in enumerate(["A", "B", "C"])
    }
    out = spectral_peaks_per_well(series, excluded=("B",))
    assert sorted(out) == ["A", "C"]
    for pk in out.values():
        assert pk.period_minutes == pytest.approx(720.0)
