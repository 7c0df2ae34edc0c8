"""Report export: PNG figures, CSV summary tables and an optional PPTX deck."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from tidal_aquifer_analyzer.analysis.pipeline import StudyResults
from tidal_aquifer_analyzer.models.profile import save_profile_json
from tidal_aquifer_analyzer.presentation import figures
from tidal_aquifer_analyzer.presentation.pptx_helpers import (
    frame_rows,
    savefig,
    slide_bullets,
    slide_chapter,
    slide_table,
    slide_title,
    slide_title_only,
)


@dataclass
class ReportOutputs:
    """Paths written by :func:`write_report`."""

    out_dir: Path
    figures: Dict[str, str] = field(default_factory=dict)
    tables: Dict[str, str] = field(default_factory=dict)
    profile_json: Optional[str] = None
    pptx: Optional[str] = None


def render_figures(res: StudyResults, out_dir: Path) -> Dict[str, str]:
    """Build every report figure and save it as PNG under ``out_dir``."""
    prof = res.profile
    out: Dict[str, str] = {}
    out["histograms"] = savefig(figures.plot_level_histograms(res.joined), out_dir, "F01_histograms")
    out["qq"] = savefig(figures.plot_qq(res.joined), out_dir, "F02_qq")
    out["timeseries"] = savefig(figures.plot_timeseries_window(res.series), out_dir, "F03_timeseries")
    if res.lags:
        out["ccf"] = savefig(
            figures.plot_ccf(res.lags, sample_interval_min=prof.sample_interval_min), out_dir, "F04_ccf"
        )
    if res.peaks:
        out["periodograms"] = savefig(
            figures.plot_periodograms(res.peaks, band_min=prof.period_band_min), out_dir, "F05_periodograms"
        )
    if res.conductivity:
        out["conductivity"] = savefig(
            figures.plot_conductivity_comparison(res.conductivity), out_dir, "F06_conductivity"
        )
    if res.fft:
        out["amplitude_phase"] = savefig(
            figures.plot_amplitude_phase_vs_distance(res.fft), out_dir, "F07_amplitude_phase"
        )
    return out


def write_tables(res: StudyResults, out_dir: Path) -> Dict[str, str]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out: Dict[str, str] = {}
    for name, df in res.summary_tables().items():
        p = out_dir / f"{name}.csv"
        df.to_csv(p, index=False)
        out[name] = str(p.resolve())
    return out


def _summary_bullets(res: StudyResults) -> List[str]:
    prof = res.profile
    bullets = [
        f"Tide record: {res.tide.n_readings} readings, resampled to {len(res.tide_resampled)} x {prof.sample_rule}",
        f"Wells analysed: {', '.join(sorted(res.series)) or 'none'}",
        f"Excluded wells: {', '.join(prof.excluded_wells) or 'none'}",
        f"Lag search: 0-{prof.max_lag_steps} steps ({prof.max_lag_steps * prof.sample_interval_min} min)",
        f"Period band: {prof.period_band_min[0]:.0f}-{prof.period_band_min[1]:.0f} min",
    ]
    if res.ttest is not None:
        t = res.ttest
        bullets.append(f"Welch t-test: t = {t.statistic:.3g}, df = {t.df:.3g}, p = {t.p_value:.3g}")
    return bullets


def build_pptx(res: StudyResults, figure_paths: Dict[str, str], path: Path) -> str:
    from pptx import Presentation

    prs = Presentation()
    slide_title(prs, "Tidal-method aquifer characterisation", f"Time zone {res.profile.timezone}")
    slide_bullets(prs, "Dataset and settings", _summary_bullets(res))

    slide_chapter(prs, "Data review")
    for key, title in (("histograms", "Water-level distributions"), ("qq", "Normal Q-Q plots"),
                       ("timeseries", "Well and tide levels")):
        if key in figure_paths:
            slide_title_only(prs, title, figure_paths[key])

    slide_chapter(prs, "Tidal response")
    for key, title in (("ccf", "Cross-correlation lag"), ("periodograms", "Smoothed periodograms"),
                       ("amplitude_phase", "FFT amplitude and phase vs distance")):
        if key in figure_paths:
            slide_title_only(prs, title, figure_paths[key])

    slide_chapter(prs, "Hydraulic conductivity")
    tables = res.summary_tables()
    if not tables["conductivity"].empty:
        cols = ["well_id", "lag_minutes", "period_minutes", "tidal_efficiency", "specific_storage",
                "conductivity", "field_conductivity"]
        headers, rows = frame_rows(tables["conductivity"][cols])
        slide_table(prs, "Jacob-Ferris conductivity [m/day]", headers, rows)
    if "conductivity" in figure_paths:
        slide_title_only(prs, "Tidal method vs slug tests", figure_paths["conductivity"])

    p = Path(path)
    prs.save(str(p))
    return str(p.resolve())


def write_report(res: StudyResults, out_dir: str | Path, *, pptx: bool = True) -> ReportOutputs:
    """Write figures, CSV tables, the profile JSON and (optionally) the PPTX deck."""
    out = Path(out_dir).expanduser()
    out.mkdir(parents=True, exist_ok=True)
    rep = ReportOutputs(out_dir=out.resolve())
    rep.figures = render_figures(res, out / "figures")
    rep.tables = write_tables(res, out / "tables")
    rep.profile_json = str(save_profile_json(res.profile, out / "profile.json").resolve())
    if pptx:
        rep.pptx = build_pptx(res, rep.figures, out / "tidal_study_report.pptx")
    return rep
