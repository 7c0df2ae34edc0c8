"""Ingest package - readers for the study's delimited exports.

This package handles:
- Reading the tide-gauge export (6-minute water level + quality flag)
- Reading the wide monitoring-well export (15-minute loggers)
- Reading the per-well constants table (compressibility, porosity, distance, slug-test K)

Key classes:
- TideGaugeReader: Tide export -> TideFrame
- WellLevelReader: Well export -> WellFrame (cutoff applied)
- read_site_table: Constants table -> SiteCatalog

Design principle:
- Readers produce frozen frames carrying their non-fatal ``warnings``
- Timestamps use the profile time zone and format; parse failures are fatal
- No value is imputed during ingestion
"""
from .readers_tide import TideGaugeReader
from .readers_wells import WellLevelReader
from .sites import read_site_table

__all__ = [
    "TideGaugeReader",
    "WellLevelReader",
    "read_site_table",
]
