"""Time alignment of the tide and well records.

Functions
---------
resample_tide
    Bucket tide readings onto the well sampling grid (floor to the interval) and
    average the water level per bucket.
wells_to_long
    Wide well table -> tidy ``(well_id, time, level_m)`` rows, nulls dropped.
join_tide
    Left join of tidy well rows to the resampled tide on exact timestamp.
series_by_well
    Split the joined frame into one time-ordered frame per well.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from tidal_aquifer_analyzer.models.frames import TideFrame, WellFrame


def resample_tide(tide: TideFrame | pd.DataFrame, *, rule: str = "15min") -> pd.DataFrame:
    """Average tide readings per ``rule`` bucket.

    Bucket boundary is ``floor(time, rule)``. Only populated buckets are returned;
    empty buckets are not interpolated.

    Returns
    -------
    DataFrame
        Columns ``time`` (bucket start) and ``tide_m`` (mean level), sorted by time.
    """
    df = tide.df if isinstance(tide, TideFrame) else tide
    if "time" not in df.columns or "level_m" not in df.columns:
        raise KeyError("tide frame must have 'time' and 'level_m' columns")

    bucket = df["time"].dt.floor(rule)
    out = (
        df.assign(time=bucket)
        .groupby("time", sort=True)["level_m"]
        .mean()
        .rename("tide_m")
        .reset_index()
    )
    return out


def wells_to_long(
    wells: WellFrame | pd.DataFrame,
    *,
    well_ids: Optional[Iterable[str]] = None,
    excluded: Iterable[str] = (),
) -> pd.DataFrame:
    """Convert the wide well table into tidy rows, dropping null readings.

    Parameters
    ----------
    wells:
        Wide frame (``time`` plus one column per well).
    well_ids:
        Columns to melt. Defaults to the frame's well ids.
    excluded:
        Wells removed from the output (data-quality decision, not a computed rule).
    """
    if isinstance(wells, WellFrame):
        df = wells.df
        ids = list(well_ids) if well_ids is not None else list(wells.well_ids)
    else:
        df = wells
        ids = list(well_ids) if well_ids is not None else [c for c in df.columns if c != "time"]

    missing = [c for c in ids if c not in df.columns]
    if missing:
        raise KeyError(f"Well columns not in frame: {missing}")

    skip = set(excluded)
    keep = [c for c in ids if c not in skip]

    long = df.melt(id_vars=["time"], value_vars=keep, var_name="well_id", value_name="level_m")
    long = long.dropna(subset=["level_m"])
    long["well_id"] = long["well_id"].astype(str)
    return long.sort_values(["well_id", "time"], kind="mergesort").reset_index(drop=True)


def join_tide(wells_long: pd.DataFrame, tide_resampled: pd.DataFrame) -> pd.DataFrame:
    """Left join well rows to resampled tide on exact timestamp equality.

    Well timestamps without a tide bucket keep ``tide_m = NaN``.
    """
    if tide_resampled["time"].duplicated().any():
        raise ValueError("resampled tide has duplicated timestamps; resample before joining")
    joined = wells_long.merge(tide_resampled[["time", "tide_m"]], on="time", how="left", validate="many_to_one")
    return joined[["well_id", "time", "level_m", "tide_m"]]


def series_by_well(joined: pd.DataFrame, *, rule: Optional[str] = None) -> Dict[str, pd.DataFrame]:
    """Split the joined frame into ``{well_id: frame}`` sorted by time.

    If ``rule`` is given, each well is laid on the regular grid between its first and
    last timestamp so that sample index equals time step; slots without a reading get
    NaN (nothing is filled). Off-grid timestamps are kept.
    """
    out: Dict[str, pd.DataFrame] = {}
    for wid, g in joined.groupby("well_id", sort=True):
        g = g.sort_values("time", kind="mergesort").reset_index(drop=True)
        if rule is not None and len(g) > 1:
            g = _regularize(g, rule)
        out[str(wid)] = g
    return out


def _regularize(g: pd.DataFrame, rule: str) -> pd.DataFrame:
    t = pd.DatetimeIndex(g["time"])
    grid = pd.date_range(t[0], t[-1], freq=rule)
    idx = grid.union(t)
    if len(idx) == len(t):
        return g
    wid = g["well_id"].iloc[0]
    r = g.set_index("time").drop(columns=["well_id"]).reindex(idx)
    r.index.name = "time"
    r = r.reset_index()
    r.insert(0, "well_id", wid)
    return r


def describe_wells(joined: pd.DataFrame) -> pd.DataFrame:
    """Per-well descriptive statistics of the aligned record."""
    rows = []
    for wid, g in series_by_well(joined).items():
        lvl = g["level_m"].to_numpy(dtype=float)
        rows.append(
            {
                "well_id": wid,
                "n": int(lvl.size),
                "n_tide_missing": int(g["tide_m"].isna().sum()),
                "mean_m": float(np.mean(lvl)) if lvl.size else np.nan,
                "std_m": float(np.std(lvl, ddof=1)) if lvl.size > 1 else np.nan,
                "min_m": float(np.min(lvl)) if lvl.size else np.nan,
                "max_m": float(np.max(lvl)) if lvl.size else np.nan,
                "start": g["time"].iloc[0] if lvl.size else pd.NaT,
                "end": g["time"].iloc[-1] if lvl.size else pd.NaT,
            }
        )
    return pd.DataFrame(rows)
