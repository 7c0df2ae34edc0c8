from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class WellSite:
    """
    Static per-well constants used by the Jacob-Ferris calculation.

    compressibility: aquifer matrix compressibility alpha [1/Pa] (literature value)
    porosity: effective porosity n [-]
    shoreline_distance_m: distance from the well to the tidal boundary x [m] (field measured)
    field_conductivity: independent slug-test hydraulic conductivity [m/day]
    """
    well_id: str
    compressibility: float
    porosity: float
    shoreline_distance_m: float
    field_conductivity: float


@dataclass(frozen=True)
class SiteCatalog:
    """
    Lookup of :class:`WellSite` constants keyed by well id.

    Notes
    - Sites without a logger column are allowed; the pipeline only uses sites for
      wells that produced both a lag and a spectral peak.
    """
    sites: Dict[str, WellSite]
    source_path: Optional[Path] = None
    warnings: Tuple[str, ...] = ()

    @property
    def well_ids(self) -> List[str]:
        return sorted(self.sites)

    def get(self, well_id: str) -> WellSite:
        if well_id not in self.sites:
            raise KeyError(f"No well-site constants for well '{well_id}'.")
        return self.sites[well_id]

    def distances(self) -> Dict[str, float]:
        return {k: s.shoreline_distance_m for k, s in self.sites.items()}

    @classmethod
    def from_sites(cls, sites: List[WellSite]) -> "SiteCatalog":
        d: Dict[str, WellSite] = {}
        for s in sites:
            if s.well_id in d:
                raise ValueError(f"Duplicate well-site entry for '{s.well_id}'.")
            d[s.well_id] = s
        return cls(sites=d)
