from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from tidal_aquifer_analyzer.ingest.timestamps import read_table, require_columns
from tidal_aquifer_analyzer.models.catalog import SiteCatalog, WellSite


SITE_COLUMNS = (
    "well_id",
    "compressibility",
    "porosity",
    "shoreline_distance_m",
    "field_conductivity",
)


def read_site_table(path: str | Path) -> SiteCatalog:
    """
    Read the per-well constants table into a :class:`SiteCatalog`.

    Expected columns (header row): well_id, compressibility [1/Pa], porosity [-],
    shoreline_distance_m [m], field_conductivity [m/day]. Extra columns are ignored.
    """
    fp = Path(path).expanduser().resolve()
    df = read_table(fp)
    require_columns(df, SITE_COLUMNS, what=f"site table '{fp.name}'")
    return SiteCatalog(
        sites=catalog_from_frame(df).sites,
        source_path=fp,
        warnings=tuple(_range_warnings(df)),
    )


def catalog_from_frame(df: pd.DataFrame) -> SiteCatalog:
    sites: List[WellSite] = []
    for row in df.itertuples(index=False):
        sites.append(
            WellSite(
                well_id=str(row.well_id).strip(),
                compressibility=float(row.compressibility),
                porosity=float(row.porosity),
                shoreline_distance_m=float(row.shoreline_distance_m),
                field_conductivity=float(row.field_conductivity),
            )
        )
    return SiteCatalog.from_sites(sites)


def _range_warnings(df: pd.DataFrame) -> List[str]:
    out: List[str] = []
    por = df["porosity"].to_numpy(dtype=float)
    bad = ~((por > 0.0) & (por < 1.0))
    if np.any(bad):
        out.append(f"porosity outside (0, 1) for wells: {df.loc[bad, 'well_id'].astype(str).tolist()}")
    for col in ("compressibility", "shoreline_distance_m", "field_conductivity"):
        v = df[col].to_numpy(dtype=float)
        bad = ~(v > 0.0)
        if np.any(bad):
            out.append(f"{col} not positive for wells: {df.loc[bad, 'well_id'].astype(str).tolist()}")
    return out
