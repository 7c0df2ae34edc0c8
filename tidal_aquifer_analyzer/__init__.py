"""Tidal Aquifer Analyzer -- Python tooling for tidal-method aquifer characterisation.

Designed for coastal monitoring-well networks logged alongside a tide gauge
(NOAA CO-OPS style exports, 15-minute pressure-transducer loggers).

This package provides tools for:
- Ingesting tide-gauge and monitoring-well water-level exports
- Resampling the 6-minute tide record onto the 15-minute well grid
- Estimating well/tide lag times by cross-correlation
- Locating the semidiurnal peak in a smoothed periodogram
- Computing Jacob-Ferris hydraulic conductivity and testing it against slug tests
- Extracting FFT amplitude/phase of the tidal signal in each well
- Rendering report figures, summary tables and a PPTX deck

Key principles:
- Fixed time zone: timestamps are localized with the profile's zone, never the process TZ
- No imputation: missing samples are dropped or flagged, never filled
- Full traceability: non-fatal issues travel as ``warnings`` on every frame/result

Main subpackages:
- analysis: Alignment, lag, spectrum, conductivity, significance and FFT steps
- gui: Interactive ipywidgets front-end
- ingest: CSV readers for tide, well and well-site tables
- models: Data models (TideFrame, WellFrame, WellSite, StudyProfile, results)
- presentation: Figures, PPTX report helpers
- scripts: Command-line runner for the whole study
"""

__all__ = []
