from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any, Dict, Optional

import ipywidgets as w
import matplotlib.pyplot as plt

from tidal_aquifer_analyzer.analysis.pipeline import StudyResults, run_study
from tidal_aquifer_analyzer.models.profile import StudyProfile, load_profile_json
from tidal_aquifer_analyzer.presentation import figures
from tidal_aquifer_analyzer.presentation.report import write_report

from .log_view import HtmlLog


# Keep a single active GUI instance per kernel to avoid duplicated callbacks / stacked widgets.
_ACTIVE_GUI: Optional[w.Widget] = None


def _close_all_figures() -> None:
    plt.close("all")


def _profile_from_inputs(profile_path: str, cutoff: str) -> StudyProfile:
    overrides: Dict[str, Any] = {}
    if cutoff.strip():
        overrides["cutoff"] = cutoff.strip()
    if profile_path.strip():
        return load_profile_json(Path(profile_path.strip()), **overrides)
    return dataclasses.replace(StudyProfile(), **overrides)


def _show_figures(res: StudyResults, out: w.Output) -> None:
    from IPython.display import display

    with out:
        out.clear_output(wait=True)
        _close_all_figures()
        builders = [
            lambda: figures.plot_level_histograms(res.joined),
            lambda: figures.plot_qq(res.joined),
            lambda: figures.plot_timeseries_window(res.series),
        ]
        if res.lags:
            builders.append(lambda: figures.plot_ccf(res.lags, sample_interval_min=res.profile.sample_interval_min))
        if res.peaks:
            builders.append(lambda: figures.plot_periodograms(res.peaks, band_min=res.profile.period_band_min))
        if res.conductivity:
            builders.append(lambda: figures.plot_conductivity_comparison(res.conductivity))
        if res.fft:
            builders.append(lambda: figures.plot_amplitude_phase_vs_distance(res.fft))
        for build in builders:
            fig = build()
            display(fig)
            plt.close(fig)


def _show_tables(res: StudyResults, out: w.Output) -> None:
    from IPython.display import display

    with out:
        out.clear_output(wait=True)
        for name, df in res.summary_tables().items():
            display(w.HTML(f"<b>{name}</b>"))
            display(df)


def build_gui() -> w.Widget:
    """
    Study panel for Jupyter / VSCode notebooks.

    Enter the three input paths (tide export, well export, well-site constants),
    optionally a profile JSON and a cutoff, then Run. Export writes figures, CSV
    tables, the profile and a PPTX deck to the output folder.
    """
    global _ACTIVE_GUI

    if _ACTIVE_GUI is not None:
        _ACTIVE_GUI.close()
        _ACTIVE_GUI = None

    txt_layout = w.Layout(width="80%")
    tide_path = w.Text(description="Tide CSV", placeholder=".../tide_gauge.csv", layout=txt_layout)
    wells_path = w.Text(description="Wells CSV", placeholder=".../well_levels.csv", layout=txt_layout)
    sites_path = w.Text(description="Sites CSV", placeholder=".../well_sites.csv", layout=txt_layout)
    profile_path = w.Text(description="Profile", placeholder="optional profile.json", layout=txt_layout)
    cutoff = w.Text(description="Cutoff", placeholder="optional, e.g. 2023-06-01 00:00", layout=w.Layout(width="40%"))
    out_dir = w.Text(description="Out dir", value="study_out", layout=w.Layout(width="40%"))
    chk_fft = w.Checkbox(description="FFT step", value=True)

    btn_run = w.Button(description="Run", button_style="primary", layout=w.Layout(width="120px"))
    btn_export = w.Button(description="Export", button_style="", layout=w.Layout(width="120px"))

    log = HtmlLog(title="Log", height_px=220)
    out_tables = w.Output(layout=w.Layout(border="1px solid #ddd", padding="8px"))
    out_figs = w.Output(layout=w.Layout(border="1px solid #ddd", padding="8px"))
    tabs = w.Tab(children=[out_tables, out_figs])
    tabs.set_title(0, "Tables")
    tabs.set_title(1, "Figures")

    state: Dict[str, Optional[StudyResults]] = {"results": None}

    def _on_run(_):
        log.clear()
        state["results"] = None
        try:
            prof = _profile_from_inputs(profile_path.value, cutoff.value)
            log.section("=== RUN ===")
            log.info(f"time zone: {prof.timezone}, grid: {prof.sample_rule}, cutoff: {prof.cutoff}")
            with log.capture():
                res = run_study(tide_path.value, wells_path.value, sites_path.value, prof, run_fft=chk_fft.value)
        except Exception as e:
            log.error(f"ERROR: {e!r}")
            return

        state["results"] = res
        log.section("=== CHECKS ===")
        log.extend_warnings(res.warnings)
        log.info(f"{log.counts().get('warning', 0)} checks reported")
        log.section("=== RESULTS ===")
        for wid in sorted(res.lags):
            log.info(f"{wid}: lag {res.lags[wid].lag_minutes:.0f} min (r={res.lags[wid].max_correlation:.3f})")
        for wid in sorted(res.conductivity):
            log.info(f"{wid}: K = {res.conductivity[wid].conductivity:.4g} m/day")
        if res.ttest is not None:
            log.info(f"Welch t-test: t={res.ttest.statistic:.3g}, df={res.ttest.df:.3g}, p={res.ttest.p_value:.3g}")
        _show_tables(res, out_tables)
        _show_figures(res, out_figs)

    def _on_export(_):
        res = state["results"]
        if res is None:
            log.warning("WARNING: nothing to export; run the study first.")
            return
        try:
            rep = write_report(res, out_dir.value)
        except Exception as e:
            log.error(f"ERROR: {e!r}")
            return
        log.section("=== EXPORT ===")
        log.info(f"wrote {len(rep.figures)} figures and {len(rep.tables)} tables to {rep.out_dir}")
        if rep.pptx:
            log.info(f"deck: {rep.pptx}")

    btn_run.on_click(_on_run)
    btn_export.on_click(_on_export)

    inputs = w.VBox([tide_path, wells_path, sites_path, profile_path, w.HBox([cutoff, out_dir, chk_fft])])
    gui = w.VBox([inputs, w.HBox([btn_run, btn_export]), log.panel, tabs])

    _ACTIVE_GUI = gui
    return gui
