import unittest
from pathlib import Path

import numpy as np
import pandas as pd

from tidal_aquifer_analyzer.analysis.align import (
    describe_wells,
    join_tide,
    resample_tide,
    series_by_well,
    wells_to_long,
)
from tidal_aquifer_analyzer.models.frames import TideFrame, WellFrame


def _ts(s: str) -> pd.Timestamp:
    return pd.Timestamp(s, tz="UTC")


class TestResampleTide(unittest.TestCase):
    def test_bucket_mean_of_six_minute_readings(self):
        times = pd.Series(
            [_ts("2023-06-01 00:00"), _ts("2023-06-01 00:06"), _ts("2023-06-01 00:12"),
             _ts("2023-06-01 00:18"), _ts("2023-06-01 00:24")]
        )
        df = pd.DataFrame({"time": times, "level_m": [1.0, 2.0, 3.0, 10.0, 20.0], "quality": "v"})
        tide = TideFrame(source_path=Path("dummy"), df=df, warnings=())

        rs = resample_tide(tide, rule="15min")

        self.assertEqual(list(rs.columns), ["time", "tide_m"])
        self.assertEqual(len(rs), 2)
        self.assertEqual(rs["time"].iloc[0], _ts("2023-06-01 00:00"))
        self.assertEqual(rs["time"].iloc[1], _ts("2023-06-01 00:15"))
        self.assertAlmostEqual(rs["tide_m"].iloc[0], 2.0)
        self.assertAlmostEqual(rs["tide_m"].iloc[1], 15.0)

    def test_four_readings_per_window_exact_mean(self):
        times = pd.Series(pd.date_range("2023-06-01 00:00", periods=8, freq="225s", tz="UTC"))
        levels = [0.1, 0.2, 0.4, 0.8, 1.0, 3.0, 5.0, 7.0]
        rs = resample_tide(pd.DataFrame({"time": times, "level_m": levels}), rule="15min")
        self.assertEqual(len(rs), 2)
        self.assertAlmostEqual(rs["tide_m"].iloc[0], (0.1 + 0.2 + 0.4 + 0.8) / 4, places=12)
        self.assertAlmostEqual(rs["tide_m"].iloc[1], 4.0, places=12)

    def test_empty_buckets_are_not_filled(self):
        df = pd.DataFrame(
            {"time": pd.Series([_ts("2023-06-01 00:00"), _ts("2023-06-01 01:00")]), "level_m": [1.0, 2.0]}
        )
        rs = resample_tide(df, rule="15min")
        self.assertEqual(len(rs), 2)

    def test_missing_columns_raise(self):
        df = pd.DataFrame({"time": pd.Series([_ts("2023-06-01 00:00")])})
        with self.assertRaises(KeyError):
            resample_tide(df)


class TestJoin(unittest.TestCase):
    def _wells(self):
        times = pd.Series(pd.date_range("2023-06-01 00:00", periods=4, freq="15min", tz="UTC"))
        df = pd.DataFrame(
            {
                "time": times,
                "A": [1.0, np.nan, 3.0, 4.0],
                "B": [5.0, 6.0, 7.0, 8.0],
                "X": [0.0, 0.0, 0.0, 0.0],
            }
        )
        return WellFrame(source_path=Path("dummy"), df=df, well_ids=("A", "B", "X"), warnings=())

    def test_wells_to_long_drops_nulls_and_excluded(self):
        long = wells_to_long(self._wells(), excluded=("X",))
        self.assertEqual(sorted(long["well_id"].unique()), ["A", "B"])
        self.assertEqual(len(long), 7)
        self.assertFalse(long["level_m"].isna().any())

    def test_wells_to_long_unknown_column_raises(self):
        with self.assertRaises(KeyError):
            wells_to_long(self._wells(), well_ids=["A", "nope"])

    def test_left_join_keeps_unmatched_as_nan(self):
        long = wells_to_long(self._wells())
        tide_rs = pd.DataFrame(
            {
                "time": pd.Series(pd.date_range("2023-06-01 00:00", periods=2, freq="15min", tz="UTC")),
                "tide_m": [0.1, 0.2],
            }
        )
        joined = join_tide(long, tide_rs)

        self.assertEqual(list(joined.columns), ["well_id", "time", "level_m", "tide_m"])
        self.assertEqual(len(joined), len(long))
        b = joined[joined["well_id"] == "B"].reset_index(drop=True)
        self.assertAlmostEqual(b["tide_m"].iloc[0], 0.1)
        self.assertAlmostEqual(b["tide_m"].iloc[1], 0.2)
        self.assertTrue(b["tide_m"].iloc[2:].isna().all())

    def test_join_rejects_duplicated_tide_times(self):
        long = wells_to_long(self._wells())
        t0 = _ts("2023-06-01 00:00")
        tide_rs = pd.DataFrame({"time": pd.Series([t0, t0]), "tide_m": [0.1, 0.2]})
        with self.assertRaises(ValueError):
            join_tide(long, tide_rs)


class TestSeriesByWell(unittest.TestCase):
    def test_regularize_inserts_nan_slots(self):
        times = pd.Series(
            [_ts("2023-06-01 00:00"), _ts("2023-06-01 00:15"), _ts("2023-06-01 01:00")]
        )
        joined = pd.DataFrame({"well_id": "A", "time": times, "level_m": [1.0, 2.0, 3.0], "tide_m": [0.0, 0.1, 0.2]})

        out = series_by_well(joined, rule="15min")
        g = out["A"]

        self.assertEqual(len(g), 5)
        self.assertEqual(list(g.columns), ["well_id", "time", "level_m", "tide_m"])
        self.assertTrue((g["well_id"] == "A").all())
        self.assertEqual(int(g["level_m"].isna().sum()), 2)
        self.assertTrue(g["time"].is_monotonic_increasing)

    def test_without_rule_rows_are_unchanged(self):
        times = pd.Series([_ts("2023-06-01 01:00"), _ts("2023-06-01 00:00")])
        joined = pd.DataFrame({"well_id": "A", "time": times, "level_m": [2.0, 1.0], "tide_m": [0.0, 0.0]})
        g = series_by_well(joined)["A"]
        self.assertEqual(len(g), 2)
        self.assertEqual(g["level_m"].tolist(), [1.0, 2.0])

    def test_describe_wells(self):
        times = pd.Series(pd.date_range("2023-06-01", periods=3, freq="15min", tz="UTC"))
        joined = pd.DataFrame(
            {"well_id": "A", "time": times, "level_m": [1.0, 2.0, 3.0], "tide_m": [0.0, np.nan, 0.0]}
        )
        d = describe_wells(joined)
        self.assertEqual(d.loc[0, "n"], 3)
        self.assertEqual(d.loc[0, "n_tide_missing"], 1)
        self.assertAlmostEqual(d.loc[0, "mean_m"], 2.0)
        self.assertAlmostEqual(d.loc[0, "std_m"], 1.0)


if __name__ == "__main__":
    unittest.main()
