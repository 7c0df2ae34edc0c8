from __future__ import annotations

"""Run the tidal-method study from the command line.

Reads the tide export, the well export and the well-site constants, runs the
whole pipeline and writes figures, CSV tables, the profile JSON and (unless
``--no-pptx``) the PPTX deck into ``--out-dir``.
"""

import dataclasses
from pathlib import Path
from typing import Optional, Sequence

from tidal_aquifer_analyzer.analysis.pipeline import run_study
from tidal_aquifer_analyzer.models.profile import StudyProfile, load_profile_json
from tidal_aquifer_analyzer.presentation.report import write_report


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m tidal_aquifer_analyzer.scripts.run_study",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Estimate aquifer hydraulic conductivity from the tidal response of wells.

            TIDE is a tide-gauge CSV export (date/time, water level, quality flag),
            WELLS a wide CSV of well levels (one column per well) and SITES a CSV with
            columns well_id, compressibility, porosity, shoreline_distance_m,
            field_conductivity.
            """
        ),
    )

    p.add_argument("tide", help="Tide-gauge CSV export")
    p.add_argument("wells", help="Well water-level CSV (wide, one column per well)")
    p.add_argument("sites", help="Well-site constants CSV")
    p.add_argument("--profile", default=None, help="Study profile JSON (default: built-in defaults)")
    p.add_argument("--out-dir", default=None, help="Output directory (default: <wells folder>/study_out)")
    p.add_argument("--cutoff", default=None, help="Drop well readings before this local date/time")
    p.add_argument("--no-fft", action="store_true", help="Skip the FFT amplitude/phase step")
    p.add_argument("--no-pptx", action="store_true", help="Do not write the PPTX deck")

    ns = p.parse_args(list(argv) if argv is not None else None)

    overrides = {}
    if ns.cutoff:
        overrides["cutoff"] = str(ns.cutoff)
    if ns.profile:
        prof = load_profile_json(Path(ns.profile).expanduser(), **overrides)
        print(f"[info] profile: {Path(ns.profile).expanduser().resolve()}")
    else:
        prof = dataclasses.replace(StudyProfile(), **overrides)

    out_dir = Path(ns.out_dir) if ns.out_dir else Path(ns.wells).expanduser().parent / "study_out"

    res = run_study(ns.tide, ns.wells, ns.sites, prof, run_fft=not ns.no_fft)
    for msg in res.warnings:
        print(f"[warn] {msg}")

    # Print a compact summary.
    for wid in sorted(res.series):
        parts = [f"[{wid}]"]
        if wid in res.lags:
            lr = res.lags[wid]
            parts.append(f"lag={lr.lag_minutes:.0f} min (r={lr.max_correlation:.3f})")
        if wid in res.peaks:
            parts.append(f"period={res.peaks[wid].period_minutes:.1f} min")
        if wid in res.conductivity:
            rec = res.conductivity[wid]
            parts.append(f"K={rec.conductivity:.4g} m/day (slug {rec.field_conductivity:.4g})")
        if wid in res.fft:
            fr = res.fft[wid]
            parts.append(f"amp={fr.max_amplitude:.3g} phase={fr.phase_rad:.3f} rad")
        print(" ".join(parts))

    if res.ttest is not None:
        t = res.ttest
        print(f"Welch t-test: t={t.statistic:.4g}, df={t.df:.4g}, p={t.p_value:.4g}")

    rep = write_report(res, out_dir, pptx=not ns.no_pptx)
    print(f"[info] wrote {len(rep.figures)} figures, {len(rep.tables)} tables to {rep.out_dir}")
    if rep.pptx:
        print(f"[info] deck: {rep.pptx}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
