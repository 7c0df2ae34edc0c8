"""Welch t-test of tidal-method vs slug-test conductivity.

Two-sided, unequal variances, unpaired. The statistic, the Welch-Satterthwaite
degrees of freedom and the p-value all come from ``scipy.stats.ttest_ind``.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np
from scipy import stats

from tidal_aquifer_analyzer.models.results import ConductivityRecord, WelchTestResult


def welch_ttest(tidal: Sequence[float], field: Sequence[float]) -> WelchTestResult:
    """Two-sided Welch t-test (unequal variances, unpaired) of tidal vs field values.

    Purely informational; nothing downstream branches on the outcome.
    """
    a = np.asarray(tidal, dtype=float)
    b = np.asarray(field, dtype=float)
    if a.size < 2 or b.size < 2:
        raise ValueError(f"need at least 2 values per sample, got {a.size} and {b.size}")
    if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
        raise ValueError("samples contain non-finite values")

    res = stats.ttest_ind(a, b, equal_var=False)
    return WelchTestResult(
        statistic=float(res.statistic),
        df=float(res.df),
        p_value=float(res.pvalue),
        n_tidal=int(a.size),
        n_field=int(b.size),
        mean_tidal=float(np.mean(a)),
        mean_field=float(np.mean(b)),
    )


def compare_conductivity(records: Mapping[str, ConductivityRecord]) -> WelchTestResult:
    """Welch test of computed vs slug-test conductivity across wells."""
    recs = [records[k] for k in sorted(records)]
    return welch_ttest([r.conductivity for r in recs], [r.field_conductivity for r in recs])
