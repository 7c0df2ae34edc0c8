"""Smoothed periodogram and dominant tidal period.

Estimator (per series of N samples, unit sampling frequency):

1) linear detrend
2) split cosine bell taper of proportion ``taper`` on each end
3) raw periodogram I_k = |FFT(x)_k|^2 / N, with the DC bin replaced by the mean of
   its two neighbours
4) circular smoothing with the convolution of modified Daniell kernels, one per
   entry of ``spans`` (half-width ``span // 2``)
5) bins k = 1..floor(N/2), frequency k/N cycles/sample, density divided by the
   taper's mean-square factor ``u2 = 1 - 5/4 * taper``

Periods are converted to minutes with the sampling interval. The dominant period
is the bin of maximum density inside an inclusive period band.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.ndimage import convolve1d
from scipy.signal import detrend

from tidal_aquifer_analyzer.models.results import SpectralPeak


@dataclass(frozen=True)
class Periodogram:
    """Smoothed spectral density over positive frequencies (cycles per sample)."""

    frequency: np.ndarray
    spectrum: np.ndarray
    n_samples: int


def modified_daniell_kernel(spans: Sequence[int]) -> np.ndarray:
    """Weights of the convolved modified Daniell kernels for ``spans``.

    A span ``s`` gives half-width ``m = s // 2`` and weights
    ``[1/(4m), 1/(2m), ..., 1/(2m), 1/(4m)]`` (length ``2m + 1``). Spans below 2
    contribute the identity kernel.
    """
    k = np.array([1.0])
    for s in spans:
        m = int(s) // 2
        if m < 1:
            continue
        w = np.full(2 * m + 1, 1.0 / (2 * m))
        w[0] = w[-1] = 1.0 / (4 * m)
        k = np.convolve(k, w)
    return k


def cosine_taper(n: int, p: float) -> np.ndarray:
    """Split cosine bell window: ``floor(n*p)`` samples tapered at each end."""
    m = int(np.floor(n * p))
    w = np.ones(n, dtype=float)
    if m == 0:
        return w
    ramp = 0.5 * (1.0 - np.cos(np.pi * np.arange(1, 2 * m, 2) / (2.0 * m)))
    w[:m] = ramp
    w[n - m :] = ramp[::-1]
    return w


def smoothed_periodogram(x: np.ndarray, *, spans: Sequence[int] = (3, 3), taper: float = 0.1) -> Periodogram:
    """Smoothed periodogram of a finite-valued 1D series (see module docstring)."""
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x must be 1D, got shape {x.shape}")
    n = int(x.size)
    if n < 4:
        raise ValueError(f"need at least 4 samples for a periodogram, got {n}")
    if not np.all(np.isfinite(x)):
        raise ValueError("x contains non-finite values")

    xd = detrend(x, type="linear")
    xd = xd * cosine_taper(n, taper)
    u2 = 1.0 - (5.0 / 8.0) * taper * 2.0

    fft = np.fft.fft(xd)
    pgram = (fft * np.conj(fft)).real / float(n)
    pgram[0] = 0.5 * (pgram[1] + pgram[n - 1])

    kern = modified_daniell_kernel(spans)
    if kern.size > 1:
        pgram = convolve1d(pgram, kern, mode="wrap")

    n_spec = n // 2
    freq = np.arange(1, n_spec + 1, dtype=float) / float(n)
    spec = pgram[1 : n_spec + 1] / u2
    return Periodogram(frequency=freq, spectrum=spec, n_samples=n)


def dominant_period(
    pg: Periodogram,
    *,
    sample_interval_min: float = 15.0,
    band_min: Tuple[float, float] = (650.0, 800.0),
    well_id: str = "",
    warnings: Iterable[str] = (),
) -> SpectralPeak:
    """Bin of maximum density whose period lies inside ``band_min`` (inclusive).

    Ties resolve to the first bin in frequency order.
    """
    periods = float(sample_interval_min) / pg.frequency
    lo, hi = band_min
    in_band = (periods >= lo) & (periods <= hi)
    if not np.any(in_band):
        raise ValueError(
            f"well '{well_id}': no periodogram bin inside {band_min} min "
            f"(N={pg.n_samples}, resolution too coarse or record too short)"
        )
    idx = np.flatnonzero(in_band)
    i = int(idx[np.argmax(pg.spectrum[idx])])
    return SpectralPeak(
        well_id=well_id,
        period_minutes=float(periods[i]),
        frequency=float(pg.frequency[i]),
        density=float(pg.spectrum[i]),
        frequencies=pg.frequency,
        periods_min=periods,
        spectrum=pg.spectrum,
        warnings=tuple(warnings),
    )


def longest_gap(missing: np.ndarray) -> int:
    """Length of the longest run of True in a boolean mask."""
    best = run = 0
    for m in np.asarray(missing, dtype=bool):
        run = run + 1 if m else 0
        best = max(best, run)
    return best


def spectral_peak(
    level: np.ndarray,
    *,
    spans: Sequence[int] = (3, 3),
    taper: float = 0.1,
    sample_interval_min: float = 15.0,
    band_min: Tuple[float, float] = (650.0, 800.0),
    well_id: str = "",
) -> SpectralPeak:
    """Periodogram + dominant period of one well series.

    Missing samples are not imputed: they are removed before the transform and the
    count is reported in ``warnings``. Removing a run of several samples joins the
    record across the gap (phase jump), which gets its own warning.
    """
    x = np.asarray(level, dtype=float)
    ok = np.isfinite(x)
    warnings: List[str] = []
    n_bad = int(x.size - np.count_nonzero(ok))
    if n_bad:
        warnings.append(f"{n_bad} missing samples dropped before the periodogram")
        gap = longest_gap(~ok)
        if gap > 1:
            warnings.append(
                f"gap of {gap} samples ({gap * float(sample_interval_min):g} min) closed up; "
                "the periodogram sees a phase jump there"
            )
    pg = smoothed_periodogram(x[ok], spans=spans, taper=taper)
    return dominant_period(
        pg,
        sample_interval_min=sample_interval_min,
        band_min=band_min,
        well_id=well_id,
        warnings=warnings,
    )


def spectral_peaks_per_well(
    series: Mapping[str, pd.DataFrame],
    *,
    excluded: Iterable[str] = (),
    spans: Sequence[int] = (3, 3),
    taper: float = 0.1,
    sample_interval_min: float = 15.0,
    band_min: Tuple[float, float] = (650.0, 800.0),
) -> Dict[str, SpectralPeak]:
    """Apply :func:`spectral_peak` to each well not in ``excluded``."""
    skip = set(excluded)
    out: Dict[str, SpectralPeak] = {}
    for wid, g in series.items():
        if wid in skip:
            continue
        out[wid] = spectral_peak(
            g["level_m"].to_numpy(dtype=float),
            spans=spans,
            taper=taper,
            sample_interval_min=sample_interval_min,
            band_min=band_min,
            well_id=wid,
        )
    return out
