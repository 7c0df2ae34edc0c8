"""Analysis package.

Design principle:
  - Ingest produces validated :class:`~tidal_aquifer_analyzer.models.frames.TideFrame`
    and :class:`~tidal_aquifer_analyzer.models.frames.WellFrame` objects.
  - Analysis consumes them and produces per-well derived quantities.

Project-wide constraint:
  - No imputation. Missing samples stay NaN on the regular sample grid; each
    estimator states how it treats them (pairwise, dropped, or rejected).

Estimators work on the sample index of the 15-minute grid; lags and periods are
converted to minutes with the profile's sampling interval.
"""

from .align import join_tide, resample_tide, series_by_well, wells_to_long
from .conductivity import conductivity_table, jacob_ferris_conductivity, specific_storage, tidal_efficiency
from .fourier import dft_spectrum, fft_per_well, tidal_amplitude_phase
from .lag import cross_correlation, estimate_lag, lags_per_well
from .pipeline import StudyResults, run_study, run_study_frames
from .significance import compare_conductivity, welch_ttest
from .spectrum import smoothed_periodogram, spectral_peak, spectral_peaks_per_well

__all__ = [
    "join_tide",
    "resample_tide",
    "series_by_well",
    "wells_to_long",
    "conductivity_table",
    "jacob_ferris_conductivity",
    "specific_storage",
    "tidal_efficiency",
    "dft_spectrum",
    "fft_per_well",
    "tidal_amplitude_phase",
    "cross_correlation",
    "estimate_lag",
    "lags_per_well",
    "StudyResults",
    "run_study",
    "run_study_frames",
    "compare_conductivity",
    "welch_ttest",
    "smoothed_periodogram",
    "spectral_peak",
    "spectral_peaks_per_well",
]
