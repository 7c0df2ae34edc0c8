from __future__ import annotations

"""End-to-end tidal-method analysis.

Ordering (one pass, no feedback):

1) Read tide, wells and well-site constants (``ingest``).
2) Resample tide onto the well grid (mean per bucket).
3) Reshape wells to tidy rows; drop excluded wells.
4) Left-join wells to tide on exact timestamp.
5) Lag per well from the cross-correlation (0..max_lag steps).
6) Dominant period per well from the smoothed periodogram.
7) Jacob-Ferris conductivity per well.
8) Welch t-test of computed vs slug-test conductivity.
9) FFT amplitude/phase per well in the tidal bin window.

Every step raises on the first error; nothing is retried. Per-well results are
``{well_id: record}`` mappings computed independently. A well with no reading
inside the tide record gets no lag (and so no conductivity); it is reported in
``warnings`` and the other wells carry on.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from tidal_aquifer_analyzer.analysis.align import (
    describe_wells,
    join_tide,
    resample_tide,
    series_by_well,
    wells_to_long,
)
from tidal_aquifer_analyzer.analysis.conductivity import conductivity_table
from tidal_aquifer_analyzer.analysis.fourier import fft_per_well
from tidal_aquifer_analyzer.analysis.lag import lags_per_well
from tidal_aquifer_analyzer.analysis.significance import compare_conductivity
from tidal_aquifer_analyzer.analysis.spectrum import spectral_peaks_per_well
from tidal_aquifer_analyzer.ingest.readers_tide import TideGaugeReader
from tidal_aquifer_analyzer.ingest.readers_wells import WellLevelReader
from tidal_aquifer_analyzer.ingest.sites import read_site_table
from tidal_aquifer_analyzer.models.catalog import SiteCatalog
from tidal_aquifer_analyzer.models.frames import TideFrame, WellFrame
from tidal_aquifer_analyzer.models.profile import StudyProfile
from tidal_aquifer_analyzer.models.results import (
    ConductivityRecord,
    FFTResult,
    LagResult,
    SpectralPeak,
    WelchTestResult,
    results_to_frame,
    welch_to_frame,
)


@dataclass(frozen=True)
class StudyResults:
    """Everything one analysis run produces.

    Attributes
    ----------
    profile:
        Configuration used for the run.
    tide_resampled:
        ``time, tide_m`` on the well grid.
    joined:
        Tidy ``well_id, time, level_m, tide_m`` rows (tide NaN when absent).
    series:
        ``{well_id: joined rows on the regular grid}``.
    lags, peaks, conductivity, fft:
        Per-well results keyed by well id.
    ttest:
        Welch test, or None when fewer than two wells have a conductivity.
    warnings:
        Non-fatal messages from every stage, in pipeline order.
    """

    profile: StudyProfile
    tide: TideFrame
    wells: WellFrame
    sites: SiteCatalog

    tide_resampled: pd.DataFrame
    joined: pd.DataFrame
    series: Dict[str, pd.DataFrame]

    lags: Dict[str, LagResult]
    peaks: Dict[str, SpectralPeak]
    conductivity: Dict[str, ConductivityRecord]
    fft: Dict[str, FFTResult]
    ttest: Optional[WelchTestResult] = None

    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def summary_tables(self) -> Dict[str, pd.DataFrame]:
        """Report tables keyed by a short name (used for CSV and PPTX export)."""
        tables = {
            "wells": describe_wells(self.joined),
            "lags": results_to_frame(self.lags),
            "spectral_peaks": results_to_frame(self.peaks),
            "conductivity": results_to_frame(self.conductivity),
            "fft": results_to_frame(self.fft),
        }
        if self.ttest is not None:
            tables["ttest"] = welch_to_frame(self.ttest)
        return tables


def run_study_frames(
    tide: TideFrame,
    wells: WellFrame,
    sites: SiteCatalog,
    profile: Optional[StudyProfile] = None,
    *,
    run_fft: bool = True,
) -> StudyResults:
    """Run steps 2-9 on already-loaded inputs."""
    prof = profile or StudyProfile()
    warnings: List[str] = list(tide.warnings) + list(wells.warnings) + list(sites.warnings)

    tide_rs = resample_tide(tide, rule=prof.sample_rule)
    long = wells_to_long(wells, excluded=prof.excluded_wells)
    joined = join_tide(long, tide_rs)

    n_missing = int(joined["tide_m"].isna().sum())
    if n_missing:
        warnings.append(f"{n_missing} well readings without a matching tide bucket")

    series = series_by_well(joined, rule=prof.sample_rule)

    lags = lags_per_well(series, max_lag=prof.max_lag_steps, sample_interval_min=prof.sample_interval_min)
    for wid in sorted(set(series) - set(lags)):
        warnings.append(f"well {wid}: no paired tide samples; lag and conductivity skipped")
    peaks = spectral_peaks_per_well(
        series,
        excluded=prof.spectral_excluded_wells,
        spans=prof.spans,
        taper=prof.taper,
        sample_interval_min=prof.sample_interval_min,
        band_min=prof.period_band_min,
    )

    no_site = sorted((set(lags) & set(peaks)) - set(sites.sites))
    if no_site:
        warnings.append(f"no well-site constants for wells {no_site}; conductivity skipped")

    cond = conductivity_table(
        sites,
        lags,
        peaks,
        fluid_compressibility=prof.fluid_compressibility,
        unit_weight=prof.unit_weight,
        factor=prof.conductivity_factor,
    )

    ttest = None
    if len(cond) >= 2:
        ttest = compare_conductivity(cond)
    else:
        warnings.append(f"t-test skipped: {len(cond)} wells with a conductivity")

    fft: Dict[str, FFTResult] = {}
    if run_fft:
        fft = fft_per_well(
            series,
            excluded=prof.fft_excluded_wells,
            bin_range=prof.fft_bin_range,
            sample_interval_min=prof.sample_interval_min,
            distances=sites.distances(),
        )

    for res in list(lags.values()) + list(peaks.values()):
        for msg in res.warnings:
            warnings.append(f"well {res.well_id}: {msg}")

    return StudyResults(
        profile=prof,
        tide=tide,
        wells=wells,
        sites=sites,
        tide_resampled=tide_rs,
        joined=joined,
        series=series,
        lags=lags,
        peaks=peaks,
        conductivity=cond,
        fft=fft,
        ttest=ttest,
        warnings=tuple(warnings),
    )


def run_study(
    tide_path: str | Path,
    wells_path: str | Path,
    sites_path: str | Path,
    profile: Optional[StudyProfile] = None,
    *,
    run_fft: bool = True,
) -> StudyResults:
    """Read the three inputs and run the whole pipeline."""
    prof = profile or StudyProfile()
    tide = TideGaugeReader(prof).read(tide_path)
    wells = WellLevelReader(prof).read(wells_path)
    sites = read_site_table(sites_path)
    return run_study_frames(tide, wells, sites, prof, run_fft=run_fft)
