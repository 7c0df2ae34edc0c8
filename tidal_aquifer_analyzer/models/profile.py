"""Study profile -- bundles all pipeline-relevant configuration.

A StudyProfile groups every parameter that affects the analysis output
into one frozen dataclass.  It can be:

- Constructed with defaults matching the field campaign (15-minute loggers,
  6-minute NOAA tide gauge, semidiurnal search band)
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON provenance
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pandas as pd

# Tuple-valued fields; JSON brings them back as lists.
_TUPLE_FIELDS = (
    "well_columns",
    "excluded_wells",
    "spectral_excluded_wells",
    "fft_excluded_wells",
    "spans",
    "period_band_min",
    "fft_bin_range",
)


@dataclass(frozen=True)
class StudyProfile:
    """Frozen configuration for the full analysis pipeline.

    Input parsing
    -------------
    timezone : str
        IANA zone used to localize every parsed timestamp. Expected to be a zone
        without daylight saving (e.g. ``Etc/GMT+5`` for loggers on EST); times
        that are ambiguous or missing at a DST change raise ValueError.
    time_format : str
        ``strftime`` format of the timestamp column in both exports.
    tide_time_column, tide_level_column, tide_quality_column : str
        Column names in the tide-gauge export.
    verified_flag : str
        Quality flag value of verified tide records.
    well_time_column : str
        Timestamp column in the well export.
    well_columns : tuple of str
        Well columns to read. Empty means every column except the timestamp.
    cutoff : str or None
        Well records before this instant (profile zone) are dropped as logger
        equilibration artefacts.

    Sampling and alignment
    ----------------------
    tide_interval_min, sample_interval_min : int
        Tide-gauge and well-logger sampling intervals [min]. The readers report
        records whose median spacing differs; the well interval also sets the grid.
    excluded_wells : tuple of str
        Wells removed from all downstream analysis.

    Estimators
    ----------
    max_lag_steps : int
        Largest non-negative CCF lag searched, in samples.
    spans : tuple of int
        Modified Daniell smoothing spans for the periodogram.
    taper : float
        Split cosine bell proportion applied before the periodogram.
    period_band_min : (float, float)
        Inclusive period band searched for the dominant peak.
    spectral_excluded_wells : tuple of str
        Wells without tidal coupling, skipped by the spectral step.
    fft_bin_range : (int, int)
        Inclusive zero-based DFT bin window containing the tidal frequency.
    fft_excluded_wells : tuple of str
        Wells skipped by the FFT step.

    Physical constants
    ------------------
    fluid_compressibility : float
        Water compressibility beta_w [1/Pa].
    unit_weight : float
        Unit weight of water gamma_w [N/m^3].
    conductivity_factor : float
        Converts m/min to the reported conductivity unit (m/day).
    """

    timezone: str = "UTC"
    time_format: str = "%m/%d/%Y %H:%M"
    tide_time_column: str = "Date Time"
    tide_level_column: str = "Water Level"
    tide_quality_column: str = "Quality"
    verified_flag: str = "v"
    well_time_column: str = "Date Time"
    well_columns: Tuple[str, ...] = ()
    cutoff: Optional[str] = None

    tide_interval_min: int = 6
    sample_interval_min: int = 15
    excluded_wells: Tuple[str, ...] = ()

    max_lag_steps: int = 40
    spans: Tuple[int, ...] = (3, 3)
    taper: float = 0.1
    period_band_min: Tuple[float, float] = (650.0, 800.0)
    spectral_excluded_wells: Tuple[str, ...] = ()
    fft_bin_range: Tuple[int, int] = (770, 870)
    fft_excluded_wells: Tuple[str, ...] = ()

    fluid_compressibility: float = 4.4e-10
    unit_weight: float = 9810.0
    conductivity_factor: float = 1440.0

    def __post_init__(self) -> None:
        if self.sample_interval_min <= 0 or self.tide_interval_min <= 0:
            raise ValueError("sampling intervals must be > 0")
        if self.max_lag_steps < 0:
            raise ValueError(f"max_lag_steps must be >= 0, got {self.max_lag_steps}")
        lo, hi = self.period_band_min
        if not (0 < lo < hi):
            raise ValueError(f"period_band_min must satisfy 0 < lo < hi, got {self.period_band_min}")
        b0, b1 = self.fft_bin_range
        if not (0 <= b0 <= b1):
            raise ValueError(f"fft_bin_range must satisfy 0 <= start <= stop, got {self.fft_bin_range}")
        if not (0.0 <= self.taper <= 0.5):
            raise ValueError(f"taper must be in [0, 0.5], got {self.taper}")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def sample_rule(self) -> str:
        """pandas offset alias of the well sampling grid (e.g. ``'15min'``)."""
        return f"{int(self.sample_interval_min)}min"

    def cutoff_timestamp(self) -> Optional[pd.Timestamp]:
        """Cutoff as a tz-aware Timestamp in the profile zone (None if unset)."""
        if self.cutoff is None:
            return None
        ts = pd.Timestamp(self.cutoff)
        if ts.tzinfo is None:
            return ts.tz_localize(self.timezone)
        return ts.tz_convert(self.timezone)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (tuples become lists)."""
        d = asdict(self)
        for k in _TUPLE_FIELDS:
            d[k] = list(d[k])
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> StudyProfile:
        """Reconstruct from a dict (e.g. loaded from JSON)."""
        d = dict(d)  # shallow copy
        for k in _TUPLE_FIELDS:
            if k in d and not isinstance(d[k], tuple):
                d[k] = tuple(d[k])
        return cls(**d)


def load_profile_json(path: Path, **overrides: Any) -> StudyProfile:
    """Read a profile JSON file; keyword overrides win over file values."""
    p = Path(path).expanduser()
    if not p.is_file():
        raise FileNotFoundError(f"Profile file not found: '{p}'")
    d = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(d, dict):
        raise ValueError(f"Profile JSON must hold an object, got {type(d).__name__}")
    d.update(overrides)
    return StudyProfile.from_dict(d)


def save_profile_json(profile: StudyProfile, path: Path) -> Path:
    p = Path(path)
    p.write_text(json.dumps(profile.to_dict(), indent=2), encoding="utf-8")
    return p
