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
from tidal_aquifer_analyzer.models.frames import WellFrame
from tidal_aquifer_analyzer.models.profile import StudyProfile


class WellLevelReader:
    """
    Reader for the wide monitoring-well export (one timestamp column, one column per well).

    Contract:
      - The profile timestamp column MUST exist; listed well columns MUST exist.
      - Timestamps are parsed with the profile format and zone (strict, no coercion).
      - Records strictly before the profile cutoff are dropped (logger equilibration).
      - Well values are coerced to float64; NaN marks a missing reading and is kept.
      - A median spacing other than the profile sampling interval is reported.
    """

    def __init__(self, profile: Optional[StudyProfile] = None):
        self.profile = profile or StudyProfile()

    def read(self, file_path: str | Path) -> WellFrame:
        prof = self.profile
        fp = Path(file_path).expanduser().resolve()
        raw = read_table(fp)
        require_columns(raw, (prof.well_time_column,), what=f"well export '{fp.name}'")

        if prof.well_columns:
            well_ids = [str(c) for c in prof.well_columns]
            require_columns(raw, well_ids, what=f"well export '{fp.name}'")
        else:
            well_ids = [c for c in raw.columns if c != prof.well_time_column]
        if not well_ids:
            raise ValueError(f"No well columns found in '{fp.name}'.")

        time = parse_timestamps(raw[prof.well_time_column], time_format=prof.time_format, timezone=prof.timezone)

        df = pd.DataFrame({"time": time})
        for wid in well_ids:
            df[wid] = pd.to_numeric(raw[wid], errors="raise").astype(np.float64)

        warnings: List[str] = [f"Well reader: {len(df)} rows x {len(well_ids)} wells from '{fp.name}'"]

        cutoff = prof.cutoff_timestamp()
        if cutoff is not None:
            keep = df["time"] >= cutoff
            n_drop = int((~keep).sum())
            df = df.loc[keep]
            warnings.append(f"Dropped {n_drop} rows before cutoff {cutoff.isoformat()}")
        df = df.reset_index(drop=True)

        warnings.extend(monotonic_warnings(df["time"], "wells"))
        warnings.extend(interval_warnings(df["time"], prof.sample_interval_min, "wells"))
        for wid in well_ids:
            n_nan = int(df[wid].isna().sum())
            if n_nan:
                warnings.append(f"well {wid}: {n_nan} missing readings")

        return WellFrame(source_path=fp, df=df, well_ids=tuple(well_ids), warnings=tuple(warnings))
