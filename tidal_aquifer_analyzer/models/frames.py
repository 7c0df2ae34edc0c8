from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import pandas as pd


@dataclass(frozen=True)
class TideFrame:
    """
    In-memory representation of one tide-gauge export after parsing.

    Notes
    - df columns: 'time' (tz-aware, profile zone), 'level_m' (float64), 'quality' (str).
    - Records are kept even when the quality flag is not 'verified'; the mismatch is
      reported in ``warnings`` and left to the analyst.
    """
    source_path: Path
    df: pd.DataFrame
    warnings: Tuple[str, ...] = ()

    @property
    def n_readings(self) -> int:
        return int(len(self.df))


@dataclass(frozen=True)
class WellFrame:
    """
    Wide monitoring-well table: one 'time' column plus one float64 column per well id.

    Notes
    - 'time' is tz-aware and already filtered to the profile cutoff.
    - NaN marks a missing logger reading; it is never filled.
    """
    source_path: Path
    df: pd.DataFrame
    well_ids: Tuple[str, ...]
    warnings: Tuple[str, ...] = ()

    @property
    def n_timestamps(self) -> int:
        return int(len(self.df))
