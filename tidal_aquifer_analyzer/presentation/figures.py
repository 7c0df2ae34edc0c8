"""Report figures.

Every builder returns a matplotlib Figure and never calls ``plt.show()``, so the
same code serves the notebook front-end, the batch script (Agg) and the PPTX
report. Data are plotted as measured: no resampling beyond what the pipeline did.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from scipy import stats

from tidal_aquifer_analyzer.models.results import ConductivityRecord, FFTResult, LagResult, SpectralPeak


def _grid(n: int, ncols: int = 3, size: Tuple[float, float] = (4.0, 3.0)):
    ncols = max(1, min(ncols, n))
    nrows = max(1, math.ceil(n / ncols))
    fig, axes = plt.subplots(nrows, ncols, figsize=(size[0] * ncols, size[1] * nrows), squeeze=False)
    flat = axes.ravel()
    for ax in flat[n:]:
        ax.set_visible(False)
    return fig, flat[:n]


def _level_columns(joined: pd.DataFrame) -> Sequence[Tuple[str, np.ndarray]]:
    cols = []
    for wid, g in joined.groupby("well_id", sort=True):
        cols.append((str(wid), g["level_m"].to_numpy(dtype=float)))
    tide = joined.drop_duplicates("time")["tide_m"].to_numpy(dtype=float)
    cols.append(("tide", tide[np.isfinite(tide)]))
    return cols


def plot_level_histograms(joined: pd.DataFrame, *, bins: int = 40):
    """Water-level histogram per well plus the resampled tide."""
    cols = _level_columns(joined)
    fig, axes = _grid(len(cols))
    for ax, (name, v) in zip(axes, cols):
        ax.hist(v, bins=bins, color="tab:blue" if name != "tide" else "tab:gray")
        ax.set_title(name)
        ax.set_xlabel("water level [m]")
        ax.set_ylabel("count")
    fig.suptitle("Water-level distributions")
    fig.tight_layout()
    return fig


def plot_qq(joined: pd.DataFrame):
    """Normal Q-Q plot per well plus the resampled tide."""
    cols = _level_columns(joined)
    fig, axes = _grid(len(cols))
    for ax, (name, v) in zip(axes, cols):
        (osm, osr), (slope, intercept, _r) = stats.probplot(v, dist="norm")
        ax.plot(osm, osr, ".", markersize=2)
        ax.plot(osm, slope * np.asarray(osm) + intercept, "r-", linewidth=1)
        ax.set_title(name)
        ax.set_xlabel("theoretical quantiles")
        ax.set_ylabel("ordered values [m]")
    fig.suptitle("Normal Q-Q plots")
    fig.tight_layout()
    return fig


def plot_timeseries_window(
    series: Mapping[str, pd.DataFrame],
    *,
    well_ids: Optional[Iterable[str]] = None,
    start: Optional[pd.Timestamp] = None,
    end: Optional[pd.Timestamp] = None,
):
    """Well and tide levels over a time window (default: first three days)."""
    ids = list(well_ids) if well_ids is not None else sorted(series)
    fig, axes = _grid(len(ids), ncols=1, size=(10.0, 2.6))
    for ax, wid in zip(axes, ids):
        g = series[wid]
        t0 = start if start is not None else g["time"].iloc[0]
        t1 = end if end is not None else t0 + pd.Timedelta(days=3)
        sub = g[(g["time"] >= t0) & (g["time"] <= t1)]
        ax.plot(sub["time"], sub["level_m"], color="tab:blue", label=f"well {wid}")
        ax.set_ylabel("well [m]")
        ax2 = ax.twinx()
        ax2.plot(sub["time"], sub["tide_m"], color="tab:gray", alpha=0.7, label="tide")
        ax2.set_ylabel("tide [m]")
        ax.set_title(f"{wid}: well vs tide")
    fig.autofmt_xdate()
    fig.tight_layout()
    return fig


def plot_periodograms(peaks: Mapping[str, SpectralPeak], *, band_min: Tuple[float, float] = (650.0, 800.0)):
    """Smoothed periodogram vs period, search band shaded, dominant period marked."""
    ids = sorted(peaks)
    fig, axes = _grid(len(ids))
    for ax, wid in zip(axes, ids):
        pk = peaks[wid]
        ax.semilogy(pk.periods_min, pk.spectrum, linewidth=1)
        ax.axvspan(band_min[0], band_min[1], color="tab:orange", alpha=0.2)
        ax.axvline(pk.period_minutes, color="tab:red", linestyle="--", linewidth=1)
        ax.set_xlim(0, max(2.0 * band_min[1], pk.period_minutes * 1.5))
        ax.set_title(f"{wid}: peak {pk.period_minutes:.0f} min")
        ax.set_xlabel("period [min]")
        ax.set_ylabel("spectral density")
    fig.tight_layout()
    return fig


def plot_ccf(lags: Mapping[str, LagResult], *, sample_interval_min: float = 15.0):
    """Cross-correlation vs lag for every well, lag of maximum marked."""
    fig, ax = plt.subplots(figsize=(7.0, 4.0))
    for wid in sorted(lags):
        res = lags[wid]
        line, = ax.plot(res.lags * sample_interval_min, res.correlation, label=f"{wid} ({res.lag_minutes:.0f} min)")
        ax.plot(res.lag_minutes, res.max_correlation, "o", color=line.get_color())
    ax.set_xlabel("lag [min]")
    ax.set_ylabel("correlation")
    ax.set_title("Well vs tide cross-correlation")
    ax.legend(fontsize=8)
    fig.tight_layout()
    return fig


def plot_amplitude_phase_vs_distance(fft: Mapping[str, FFTResult]):
    """FFT amplitude and phase at the tidal bin against shoreline distance."""
    recs = [fft[k] for k in sorted(fft) if fft[k].shoreline_distance_m is not None]
    fig, (ax_a, ax_p) = plt.subplots(1, 2, figsize=(10.0, 4.0))
    x = [r.shoreline_distance_m for r in recs]
    ax_a.scatter(x, [r.max_amplitude for r in recs])
    ax_p.scatter(x, [r.phase_rad for r in recs])
    for r in recs:
        ax_a.annotate(r.well_id, (r.shoreline_distance_m, r.max_amplitude), fontsize=8)
        ax_p.annotate(r.well_id, (r.shoreline_distance_m, r.phase_rad), fontsize=8)
    ax_a.set_xlabel("distance from shoreline [m]")
    ax_a.set_ylabel("|FFT|/N [m]")
    ax_a.set_title("Tidal amplitude")
    ax_p.set_xlabel("distance from shoreline [m]")
    ax_p.set_ylabel("phase [rad]")
    ax_p.set_title("Tidal phase")
    fig.tight_layout()
    return fig


def plot_conductivity_comparison(records: Mapping[str, ConductivityRecord]):
    """Tidal-method vs slug-test conductivity per well (log scale)."""
    ids = sorted(records)
    k_tidal = [records[w].conductivity for w in ids]
    k_field = [records[w].field_conductivity for w in ids]
    x = np.arange(len(ids))
    fig, ax = plt.subplots(figsize=(7.0, 4.0))
    ax.bar(x - 0.2, k_tidal, width=0.4, label="Jacob-Ferris")
    ax.bar(x + 0.2, k_field, width=0.4, label="slug test")
    ax.set_xticks(x)
    ax.set_xticklabels(ids)
    ax.set_yscale("log")
    ax.set_ylabel("K [m/day]")
    ax.set_title("Hydraulic conductivity")
    ax.legend()
    fig.tight_layout()
    return fig
