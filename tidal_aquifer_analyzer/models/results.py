from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Dict, Mapping, Optional, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class LagResult:
    """Cross-correlation lag of one well against the resampled tide.

    Attributes
    ----------
    well_id:
        Well identifier.
    lag_steps, lag_minutes:
        Lag of maximum correlation, in samples and in minutes.
    max_correlation:
        Correlation coefficient at ``lag_steps``.
    lags, correlation:
        Full CCF over the searched non-negative lag window, shape ``(n_lags,)``.
    """

    well_id: str
    lag_steps: int
    lag_minutes: float
    max_correlation: float

    lags: np.ndarray
    correlation: np.ndarray

    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SpectralPeak:
    """Dominant period of one well's smoothed periodogram.

    ``frequencies`` is in cycles per sample; ``periods_min`` converts it with the
    sampling interval. ``spectrum`` is the smoothed spectral density.
    """

    well_id: str
    period_minutes: float
    frequency: float
    density: float

    frequencies: np.ndarray
    periods_min: np.ndarray
    spectrum: np.ndarray

    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ConductivityRecord:
    """Static well-site constants joined with the lag and period, plus derived values.

    Units: compressibility [1/Pa], shoreline distance [m], lag and period [min],
    specific storage [1/m], conductivities [m/day].
    """

    well_id: str
    compressibility: float
    porosity: float
    shoreline_distance_m: float
    field_conductivity: float
    lag_minutes: float
    period_minutes: float
    tidal_efficiency: float
    specific_storage: float
    conductivity: float


@dataclass(frozen=True)
class WelchTestResult:
    """Welch two-sample t-test (unequal variances, unpaired)."""

    statistic: float
    df: float
    p_value: float
    n_tidal: int
    n_field: int
    mean_tidal: float
    mean_field: float


@dataclass(frozen=True)
class FFTResult:
    """Largest normalised DFT magnitude inside the tidal bin window, and its phase.

    ``max_amplitude`` follows the ``|FFT|/N`` convention, so a real sinusoid of
    amplitude A shows up as A/2.
    """

    well_id: str
    max_amplitude: float
    phase_rad: float
    bin_index: int
    n_samples: int
    frequency_per_min: float
    shoreline_distance_m: Optional[float] = None


def results_to_frame(results: Mapping[str, object]) -> pd.DataFrame:
    """Flatten a ``{well_id: result}`` mapping into one row per well.

    Array-valued fields (full CCF, spectra) are left out; ``warnings`` is joined
    into a single string column.
    """
    rows = []
    for _, res in sorted(results.items()):
        row: Dict[str, object] = {}
        for f in fields(res):
            val = getattr(res, f.name)
            if isinstance(val, np.ndarray):
                continue
            if f.name == "warnings":
                val = "; ".join(val)
            row[f.name] = val
        rows.append(row)
    return pd.DataFrame(rows)


def welch_to_frame(res: WelchTestResult) -> pd.DataFrame:
    return pd.DataFrame([asdict(res)])
