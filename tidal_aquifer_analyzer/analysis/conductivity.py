"""Jacob-Ferris tidal-method hydraulic conductivity.

  TE  = alpha / (alpha + n * beta_w)                    tidal efficiency
  Ss  = n * beta_w * gamma_w / (1 - TE)                  specific storage [1/m]
  K   = Ss * P * x^2 / (4 * pi * t_lag^2) * factor       conductivity

with aquifer compressibility alpha [1/Pa], porosity n, water compressibility
beta_w [1/Pa], unit weight gamma_w [N/m^3], tidal period P and lag t_lag in
minutes, shoreline distance x in metres. ``factor`` converts m/min to the
reported unit (1440 -> m/day).

A zero lag is a defect in the inputs and is not handled.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping

from tidal_aquifer_analyzer.models.catalog import SiteCatalog
from tidal_aquifer_analyzer.models.results import ConductivityRecord, LagResult, SpectralPeak

FLUID_COMPRESSIBILITY = 4.4e-10  # 1/Pa
UNIT_WEIGHT_WATER = 9810.0  # N/m^3
M_PER_MIN_TO_M_PER_DAY = 1440.0


def tidal_efficiency(compressibility: float, porosity: float, *, fluid_compressibility: float = FLUID_COMPRESSIBILITY) -> float:
    return compressibility / (compressibility + porosity * fluid_compressibility)


def specific_storage(
    porosity: float,
    te: float,
    *,
    fluid_compressibility: float = FLUID_COMPRESSIBILITY,
    unit_weight: float = UNIT_WEIGHT_WATER,
) -> float:
    return (porosity * fluid_compressibility * unit_weight) / (1.0 - te)


def jacob_ferris_conductivity(
    ss: float,
    period_min: float,
    distance_m: float,
    lag_min: float,
    *,
    factor: float = M_PER_MIN_TO_M_PER_DAY,
) -> float:
    return (ss * period_min * distance_m**2) / (4.0 * math.pi * lag_min**2) * factor


def conductivity_table(
    sites: SiteCatalog,
    lags: Mapping[str, LagResult],
    peaks: Mapping[str, SpectralPeak],
    *,
    fluid_compressibility: float = FLUID_COMPRESSIBILITY,
    unit_weight: float = UNIT_WEIGHT_WATER,
    factor: float = M_PER_MIN_TO_M_PER_DAY,
) -> Dict[str, ConductivityRecord]:
    """Join site constants with lag and dominant period, for wells present in all three."""
    out: Dict[str, ConductivityRecord] = {}
    for wid in sorted(set(lags) & set(peaks) & set(sites.sites)):
        site = sites.get(wid)
        lag_min = lags[wid].lag_minutes
        period_min = peaks[wid].period_minutes

        te = tidal_efficiency(site.compressibility, site.porosity, fluid_compressibility=fluid_compressibility)
        ss = specific_storage(site.porosity, te, fluid_compressibility=fluid_compressibility, unit_weight=unit_weight)
        k = jacob_ferris_conductivity(ss, period_min, site.shoreline_distance_m, lag_min, factor=factor)

        out[wid] = ConductivityRecord(
            well_id=wid,
            compressibility=site.compressibility,
            porosity=site.porosity,
            shoreline_distance_m=site.shoreline_distance_m,
            field_conductivity=site.field_conductivity,
            lag_minutes=lag_min,
            period_minutes=period_min,
            tidal_efficiency=te,
            specific_storage=ss,
            conductivity=k,
        )
    return out
