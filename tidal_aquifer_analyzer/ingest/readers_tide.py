from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from tidal_aquifer_analyzer.ingest.timestamps import (
    interval_warnings,
    monotonic_warnings,
    parse_timestamps,
    read_table,
    require_columns,
)
from tidal_aquifer_analyzer.models.frames import TideFrame
from tidal_aquifer_analyzer.models.profile import StudyProfile


class TideGaugeReader:
    """
    Reader for tide-gauge exports (NOAA CO-OPS CSV layout by default).

    Contract:
      - The timestamp, water-level and quality columns named in the profile MUST exist.
      - Timestamps are parsed with the profile format and localized to the profile zone.
      - Water levels must be numeric; blanks become NaN and are reported.
      - Quality flags other than the verified flag are reported, not removed.
      - A median spacing other than the profile tide interval is reported.
    """

    def __init__(self, profile: Optional[StudyProfile] = None):
        self.profile = profile or StudyProfile()

    def read(self, file_path: str | Path) -> TideFrame:
        prof = self.profile
        fp = Path(file_path).expanduser().resolve()
        raw = read_table(fp)
        require_columns(
            raw,
            (prof.tide_time_column, prof.tide_level_column, prof.tide_quality_column),
            what=f"tide export '{fp.name}'",
        )

        time = parse_timestamps(raw[prof.tide_time_column], time_format=prof.time_format, timezone=prof.timezone)
        level = pd.to_numeric(raw[prof.tide_level_column], errors="raise").astype(np.float64)
        quality = raw[prof.tide_quality_column].astype(str).str.strip()

        df = pd.DataFrame({"time": time, "level_m": level, "quality": quality}).reset_index(drop=True)

        warnings: List[str] = [f"Tide reader: {len(df)} readings from '{fp.name}'"]
        warnings.extend(monotonic_warnings(df["time"], "tide"))
        warnings.extend(interval_warnings(df["time"], prof.tide_interval_min, "tide"))
        warnings.extend(quality_warnings(df, prof.verified_flag))

        n_nan = int(df["level_m"].isna().sum())
        if n_nan:
            warnings.append(f"tide: {n_nan} blank water-level readings")

        return TideFrame(source_path=fp, df=df, warnings=tuple(warnings))


def quality_warnings(df: pd.DataFrame, verified_flag: str) -> List[str]:
    """Report records whose quality flag is not the verified flag."""
    bad = df["quality"] != verified_flag
    n_bad = int(bad.sum())
    if not n_bad:
        return []
    flags = sorted(df.loc[bad, "quality"].unique().tolist())
    return [f"tide: {n_bad} records not '{verified_flag}' (flags: {flags})"]
