"""Shared synthetic field campaign for pipeline, report and script tests.

Ten days of a 720-minute tide sampled every 6 minutes, and two wells on a
15-minute grid that follow the tide with a pure delay:

  W1: 120 min behind the resampled tide, amplitude 0.2 m, 480 m from shore
  W2: 240 min behind the resampled tide, amplitude 0.1 m, 900 m from shore
  W9: noisy logger, excluded in the study profile

The resampled tide is centred 6 minutes after each bucket start (3 or 2
readings per bucket), so the well phases carry that offset.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from tidal_aquifer_analyzer.models.profile import StudyProfile

START = pd.Timestamp("2023-06-01 00:00")
N_DAYS = 10
PERIOD_MIN = 720.0
TIME_FORMAT = "%m/%d/%Y %H:%M"


def _wave(t_min: np.ndarray, delay_min: float) -> np.ndarray:
    return np.cos(2.0 * np.pi * (t_min - delay_min) / PERIOD_MIN)


def write_study_inputs(folder: Path) -> dict:
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)

    t_tide = np.arange(0, N_DAYS * 1440, 6, dtype=float)
    tide = pd.DataFrame(
        {
            "Date Time": (START + pd.to_timedelta(t_tide, unit="min")).strftime(TIME_FORMAT),
            "Water Level": np.round(0.5 + 0.8 * _wave(t_tide, 0.0), 6),
            "Quality": "v",
        }
    )
    tide_path = folder / "tide.csv"
    tide.to_csv(tide_path, index=False)

    t_well = np.arange(0, N_DAYS * 1440, 15, dtype=float)
    rng = np.random.default_rng(7)
    w9 = rng.normal(2.0, 0.05, t_well.size)
    w9[::50] = np.nan
    wells = pd.DataFrame(
        {
            "Date Time": (START + pd.to_timedelta(t_well, unit="min")).strftime(TIME_FORMAT),
            "W1": 1.0 + 0.2 * _wave(t_well, 120.0 - 6.0),
            "W2": 3.0 + 0.1 * _wave(t_well, 240.0 - 6.0),
            "W9": w9,
        }
    )
    wells_path = folder / "wells.csv"
    wells.to_csv(wells_path, index=False)

    sites = pd.DataFrame(
        {
            "well_id": ["W1", "W2", "W3"],
            "compressibility": [1e-7, 2e-8, 5e-8],
            "porosity": [0.46, 0.30, 0.35],
            "shoreline_distance_m": [480.0, 900.0, 1200.0],
            "field_conductivity": [1000.0, 400.0, 250.0],
        }
    )
    sites_path = folder / "sites.csv"
    sites.to_csv(sites_path, index=False)

    return {"tide": tide_path, "wells": wells_path, "sites": sites_path}


def study_profile() -> StudyProfile:
    """Defaults plus the exclusions and an FFT window for a 960-sample record."""
    return dataclasses.replace(StudyProfile(), excluded_wells=("W9",), fft_bin_range=(15, 25))


@pytest.fixture
def study_inputs(tmp_path):
    return write_study_inputs(tmp_path / "inputs")


@pytest.fixture
def profile():
    return study_profile()
