"""GUI package - interactive ipywidgets interface.

One panel runs the whole study:
1. Inputs: tide export, well export, well-site constants, optional profile/cutoff
2. Run: pipeline checks and per-well results in the HTML log
3. Tables / Figures tabs: summary tables and report figures
4. Export: PNG figures, CSV tables, profile JSON and PPTX deck

Entry point:
    from tidal_aquifer_analyzer.gui.app import build_gui
    gui = build_gui()
"""
