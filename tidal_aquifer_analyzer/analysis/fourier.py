"""FFT-based amplitude/phase of the tidal signal in each well.

Provides a single-series discrete Fourier transform with standard ``FFT/N``
normalisation and the amplitude/phase pick inside a fixed bin window.

Functions
---------
dft_spectrum
    Normalised complex coefficients, magnitude and phase of one series.
tidal_amplitude_phase
    Largest magnitude inside an inclusive bin window and its phase.
fft_per_well
    Apply the pick to every qualifying well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from tidal_aquifer_analyzer.models.results import FFTResult


@dataclass(frozen=True)
class DftSpectrum:
    """Fourier coefficients of one series.

    Attributes
    ----------
    coeff:
        Complex coefficients, normalization ``coeff = FFT(x)/N``, shape ``(N,)``.
    magnitude, phase:
        ``|coeff|`` and ``angle(coeff)`` in radians.
    """

    coeff: np.ndarray
    magnitude: np.ndarray
    phase: np.ndarray

    @property
    def n_samples(self) -> int:
        return int(self.coeff.size)


def dft_spectrum(x: np.ndarray) -> DftSpectrum:
    r"""Compute the normalised DFT of a gap-free series.

    Parameters
    ----------
    x:
        1D array sampled on a regular grid. Missing values are not permitted.

    Returns
    -------
    DftSpectrum
        Complex coefficients with normalization ``FFT/N``.

    Notes
    -----
    A real sinusoid ``A cos(2\pi k n / N + \varphi)`` yields magnitude ``A/2`` and
    phase ``\varphi`` at bin ``k``.
    """
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x must be 1D, got shape {x.shape}")
    n = int(x.size)
    if n <= 0:
        raise ValueError("x must not be empty")
    if not np.all(np.isfinite(x)):
        n_bad = int(n - np.count_nonzero(np.isfinite(x)))
        raise ValueError(f"series contains {n_bad} missing values; the FFT step requires a gap-free record")

    coeff = np.fft.fft(x) / float(n)
    return DftSpectrum(coeff=coeff, magnitude=np.abs(coeff), phase=np.angle(coeff))


def tidal_amplitude_phase(
    x: np.ndarray,
    *,
    bin_range: Tuple[int, int] = (770, 870),
    sample_interval_min: float = 15.0,
    well_id: str = "",
    shoreline_distance_m: Optional[float] = None,
) -> FFTResult:
    """Max normalised magnitude in the inclusive zero-based ``bin_range`` and its phase.

    Ties resolve to the first (lowest) bin.
    """
    spec = dft_spectrum(x)
    n = spec.n_samples
    b0, b1 = int(bin_range[0]), int(bin_range[1])
    if not (0 <= b0 <= b1 < n):
        raise ValueError(f"well '{well_id}': bin_range {bin_range} outside [0, {n - 1}]")

    window = spec.magnitude[b0 : b1 + 1]
    i = b0 + int(np.argmax(window))
    return FFTResult(
        well_id=well_id,
        max_amplitude=float(spec.magnitude[i]),
        phase_rad=float(spec.phase[i]),
        bin_index=i,
        n_samples=n,
        frequency_per_min=float(i) / (float(n) * float(sample_interval_min)),
        shoreline_distance_m=shoreline_distance_m,
    )


def fft_per_well(
    series: Mapping[str, pd.DataFrame],
    *,
    excluded: Iterable[str] = (),
    bin_range: Tuple[int, int] = (770, 870),
    sample_interval_min: float = 15.0,
    distances: Optional[Mapping[str, float]] = None,
) -> Dict[str, FFTResult]:
    """Apply :func:`tidal_amplitude_phase` to each well not in ``excluded``."""
    skip = set(excluded)
    dist = dict(distances or {})
    out: Dict[str, FFTResult] = {}
    for wid, g in series.items():
        if wid in skip:
            continue
        out[wid] = tidal_amplitude_phase(
            g["level_m"].to_numpy(dtype=float),
            bin_range=bin_range,
            sample_interval_min=sample_interval_min,
            well_id=wid,
            shoreline_distance_m=dist.get(wid),
        )
    return out
