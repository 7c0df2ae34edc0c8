"""Cross-correlation lag between each well and the tide.

The estimator is the sample cross-correlation function with pairwise handling of
missing values:

  x, y demeaned with their NaN-aware means
  c_xy(k) = sum_i x[i+k] y[i] / (n_pairs(k) + k)      (complete pairs only)
  r_xy(k) = c_xy(k) / sqrt(c_xx(0) c_yy(0))

A positive ``k`` means the well (x) lags the tide (y). Only ``k = 0..max_lag`` is
searched; a well leading the tide is not physically meaningful here.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

import numpy as np
import pandas as pd

from tidal_aquifer_analyzer.models.results import LagResult


def _lagged_cov(x: np.ndarray, y: np.ndarray, k: int) -> float:
    """Covariance of x[i+k] with y[i] over complete pairs, divided by n_pairs + k."""
    n = x.size
    if k >= n:
        return float("nan")
    a = x[k:]
    b = y[: n - k]
    ok = np.isfinite(a) & np.isfinite(b)
    nu = int(np.count_nonzero(ok))
    if nu == 0:
        return float("nan")
    return float(np.sum(a[ok] * b[ok]) / float(nu + k))


def cross_correlation(x: np.ndarray, y: np.ndarray, *, max_lag: int) -> tuple[np.ndarray, np.ndarray]:
    """Normalised cross-correlation of ``x[t+k]`` against ``y[t]`` for ``k = 0..max_lag``.

    Parameters
    ----------
    x, y:
        Equal-length 1D arrays on the same sample grid. NaN marks a missing sample.
    max_lag:
        Largest lag (in samples) to evaluate.

    Returns
    -------
    (lags, r)
        Integer lags and correlation coefficients, shape ``(max_lag + 1,)``.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.ndim != 1 or y.ndim != 1:
        raise ValueError(f"x and y must be 1D, got shapes {x.shape} and {y.shape}")
    if x.size != y.size:
        raise ValueError(f"x and y must have the same length, got {x.size} and {y.size}")
    max_lag = int(max_lag)
    if max_lag < 0:
        raise ValueError(f"max_lag must be >= 0, got {max_lag}")
    if not np.any(np.isfinite(x)) or not np.any(np.isfinite(y)):
        raise ValueError("x or y has no finite samples")

    xc = x - np.nanmean(x)
    yc = y - np.nanmean(y)

    sx = _lagged_cov(xc, xc, 0)
    sy = _lagged_cov(yc, yc, 0)
    norm = np.sqrt(sx * sy)

    lags = np.arange(max_lag + 1, dtype=int)
    r = np.array([_lagged_cov(xc, yc, int(k)) for k in lags], dtype=float)
    if norm > 0:
        r = r / norm
    else:
        r[:] = np.nan
    return lags, r


def estimate_lag(
    well: np.ndarray,
    tide: np.ndarray,
    *,
    max_lag: int = 40,
    sample_interval_min: float = 15.0,
    well_id: str = "",
) -> LagResult:
    """Lag of maximum correlation between a well and the tide.

    Ties resolve to the smallest lag (first occurrence).
    """
    lags, r = cross_correlation(well, tide, max_lag=max_lag)
    if not np.any(np.isfinite(r)):
        raise ValueError(f"well '{well_id}': no paired well/tide samples in the lag window")

    i = int(np.nanargmax(r))
    warnings: List[str] = []
    n_pairs = paired_samples(well, tide)
    if n_pairs < 2 * (max_lag + 1):
        warnings.append(f"only {n_pairs} paired samples for {max_lag + 1} lags")
    if max_lag > 0 and i == int(lags[-1]):
        warnings.append(f"maximum at the edge of the lag window ({i} steps)")

    return LagResult(
        well_id=well_id,
        lag_steps=int(lags[i]),
        lag_minutes=float(lags[i]) * float(sample_interval_min),
        max_correlation=float(r[i]),
        lags=lags,
        correlation=r,
        warnings=tuple(warnings),
    )


def paired_samples(well: np.ndarray, tide: np.ndarray) -> int:
    """Number of time steps where both the well and the tide have a reading."""
    w = np.asarray(well, dtype=float)
    t = np.asarray(tide, dtype=float)
    return int(np.count_nonzero(np.isfinite(w) & np.isfinite(t)))


def lags_per_well(
    series: Mapping[str, pd.DataFrame],
    *,
    max_lag: int = 40,
    sample_interval_min: float = 15.0,
) -> Dict[str, LagResult]:
    """Apply :func:`estimate_lag` to every ``{well_id: joined frame}`` entry.

    Wells without a single paired well/tide sample (logger outside the tide
    record) are left out of the result; the caller reports them.
    """
    out: Dict[str, LagResult] = {}
    for wid, g in series.items():
        level = g["level_m"].to_numpy(dtype=float)
        tide = g["tide_m"].to_numpy(dtype=float)
        if paired_samples(level, tide) == 0:
            continue
        out[wid] = estimate_lag(
            level,
            tide,
            max_lag=max_lag,
            sample_interval_min=sample_interval_min,
            well_id=wid,
        )
    return out
