from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pandas as pd


def read_table(path: Path, *, sep: str = ",") -> pd.DataFrame:
    """
    Read a delimited export with a header row.

    Header names are stripped (NOAA exports pad them with spaces). A missing file
    raises FileNotFoundError; nothing is recovered.
    """
    p = Path(path).expanduser().resolve()
    if not p.is_file():
        raise FileNotFoundError(f"Input file not found: '{p}'")
    df = pd.read_csv(p, sep=sep, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df


def require_columns(df: pd.DataFrame, columns: Iterable[str], what: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required columns in {what}: {missing} (have {list(df.columns)})")


def parse_timestamps(values: pd.Series, *, time_format: str, timezone: str) -> pd.Series:
    """
    Parse text timestamps with a fixed format and localize them into ``timezone``.

    Any unparseable entry raises ValueError (strict: no coercion to NaT). Loggers
    record local standard time, so ``timezone`` should be a zone without daylight
    saving (``UTC``, ``Etc/GMT+5``); a wall-clock time that is ambiguous or does
    not exist in ``timezone`` raises ValueError instead of being guessed.
    """
    raw = values.astype(str).str.strip()
    try:
        parsed = pd.to_datetime(raw, format=time_format)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Timestamp parse failure with format '{time_format}': {exc}") from exc
    try:
        return parsed.dt.tz_localize(timezone, ambiguous="raise", nonexistent="raise")
    except Exception as exc:  # pytz or zoneinfo errors depending on the pandas version
        raise ValueError(
            f"Timestamps are ambiguous or nonexistent in '{timezone}' (daylight saving change?); "
            f"use a zone without DST: {exc}"
        ) from exc


def monotonic_warnings(times: pd.Series, what: str) -> List[str]:
    """Non-fatal checks: strictly increasing, one row per timestamp."""
    out: List[str] = []
    if times.empty:
        out.append(f"{what}: no records")
        return out
    n_dup = int(times.duplicated().sum())
    if n_dup:
        out.append(f"{what}: {n_dup} duplicated timestamps")
    if not times.is_monotonic_increasing:
        out.append(f"{what}: timestamps are not monotonically increasing")
    return out


def interval_warnings(times: pd.Series, expected_min: float, what: str) -> List[str]:
    """Warn when the median spacing of ``times`` is not the configured sampling interval."""
    steps = times.sort_values().diff().dropna()
    if steps.empty:
        return []
    median_min = steps.median() / pd.Timedelta(minutes=1)
    if abs(median_min - float(expected_min)) > 1e-9:
        return [f"{what}: median spacing {median_min:g} min, profile expects {float(expected_min):g} min"]
    return []
