import math
import unittest

import numpy as np

from tidal_aquifer_analyzer.analysis.significance import compare_conductivity, welch_ttest
from tidal_aquifer_analyzer.models.results import ConductivityRecord


class TestWelch(unittest.TestCase):
    def test_matches_hand_computation(self):
        a = [1300.0, 900.0, 2100.0, 450.0]
        b = [1000.0, 400.0, 250.0, 800.0]

        res = welch_ttest(a, b)

        ma, mb = np.mean(a), np.mean(b)
        va, vb = np.var(a, ddof=1), np.var(b, ddof=1)
        se2 = va / len(a) + vb / len(b)
        t = (ma - mb) / math.sqrt(se2)
        df = se2**2 / ((va / len(a)) ** 2 / (len(a) - 1) + (vb / len(b)) ** 2 / (len(b) - 1))

        self.assertAlmostEqual(res.statistic, t, places=9)
        self.assertAlmostEqual(res.df, df, places=9)
        self.assertTrue(0.0 < res.p_value < 1.0)
        self.assertEqual(res.n_tidal, 4)
        self.assertEqual(res.n_field, 4)
        self.assertAlmostEqual(res.mean_tidal, ma)
        self.assertAlmostEqual(res.mean_field, mb)

    def test_equal_variances_give_pooled_dof(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([4.0, 5.0, 6.0])
        self.assertAlmostEqual(welch_ttest(a, b).df, 4.0)

    def test_too_few_values(self):
        with self.assertRaises(ValueError):
            welch_ttest([1.0], [2.0, 3.0])

    def test_non_finite_rejected(self):
        with self.assertRaises(ValueError):
            welch_ttest([1.0, float("inf")], [2.0, 3.0])

    def test_compare_conductivity_pairs_fields(self):
        def rec(wid, k, kf):
            return ConductivityRecord(
                well_id=wid,
                compressibility=1e-7,
                porosity=0.4,
                shoreline_distance_m=100.0,
                field_conductivity=kf,
                lag_minutes=60.0,
                period_minutes=720.0,
                tidal_efficiency=0.99,
                specific_storage=1e-3,
                conductivity=k,
            )

        records = {"B": rec("B", 20.0, 3.0), "A": rec("A", 10.0, 1.0), "C": rec("C", 15.0, 2.0)}
        res = compare_conductivity(records)
        direct = welch_ttest([10.0, 20.0, 15.0], [1.0, 3.0, 2.0])
        self.assertAlmostEqual(res.statistic, direct.statistic)
        self.assertAlmostEqual(res.p_value, direct.p_value)
        self.assertAlmostEqual(res.mean_tidal, 15.0)
        self.assertAlmostEqual(res.mean_field, 2.0)


if __name__ == "__main__":
    unittest.main()
