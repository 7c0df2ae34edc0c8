"""Tests for StudyProfile frozen dataclass."""

import dataclasses
import json

import pandas as pd
import pytest

from tidal_aquifer_analyzer.models.profile import StudyProfile, load_profile_json, save_profile_json


class TestDefaults:
    def test_defaults(self):
        p = StudyProfile()
        assert p.timezone == "UTC"
        assert p.sample_interval_min == 15
        assert p.tide_interval_min == 6
        assert p.max_lag_steps == 40
        assert p.spans == (3, 3)
        assert p.taper == 0.1
        assert p.period_band_min == (650.0, 800.0)
        assert p.fft_bin_range == (770, 870)
        assert p.fluid_compressibility == 4.4e-10
        assert p.unit_weight == 9810.0
        assert p.conductivity_factor == 1440.0
        assert p.cutoff is None

    def test_sample_rule(self):
        assert StudyProfile().sample_rule == "15min"
        assert dataclasses.replace(StudyProfile(), sample_interval_min=5).sample_rule == "5min"


class TestFrozen:
    def test_cannot_set_attribute(self):
        p = StudyProfile()
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.max_lag_steps = 10

    def test_replace_creates_new(self):
        p1 = StudyProfile()
        p2 = dataclasses.replace(p1, excluded_wells=("W9",))
        assert p1.excluded_wells == ()
        assert p2.excluded_wells == ("W9",)


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"period_band_min": (800.0, 650.0)},
            {"period_band_min": (0.0, 650.0)},
            {"fft_bin_range": (10, 5)},
            {"sample_interval_min": 0},
            {"max_lag_steps": -1},
            {"taper": 0.7},
        ],
    )
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            StudyProfile(**kwargs)


class TestCutoff:
    def test_naive_cutoff_localized_to_profile_zone(self):
        p = StudyProfile(timezone="America/New_York", cutoff="2023-06-01 12:00")
        ts = p.cutoff_timestamp()
        assert ts == pd.Timestamp("2023-06-01 12:00", tz="America/New_York")

    def test_aware_cutoff_converted(self):
        p = StudyProfile(cutoff="2023-06-01T12:00:00+00:00")
        assert p.cutoff_timestamp() == pd.Timestamp("2023-06-01 12:00", tz="UTC")

    def test_no_cutoff(self):
        assert StudyProfile().cutoff_timestamp() is None


class TestSerialization:
    def test_dict_round_trip(self):
        p = StudyProfile(excluded_wells=("W9", "W10"), spans=(5,), cutoff="2023-06-01 00:00")
        d = p.to_dict()
        assert d["excluded_wells"] == ["W9", "W10"]
        assert d["spans"] == [5]
        assert StudyProfile.from_dict(d) == p

    def test_json_file_round_trip_with_override(self, tmp_path):
        p = StudyProfile(fft_bin_range=(15, 25))
        path = save_profile_json(p, tmp_path / "profile.json")
        assert json.loads(path.read_text(encoding="utf-8"))["fft_bin_range"] == [15, 25]

        loaded = load_profile_json(path)
        assert loaded == p

        overridden = load_profile_json(path, cutoff="2023-06-02 00:00")
        assert overridden.cutoff == "2023-06-02 00:00"
        assert overridden.fft_bin_range == (15, 25)

    def test_missing_profile_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_profile_json(tmp_path / "nope.json")

    def test_unknown_key_rejected(self):
        d = StudyProfile().to_dict()
        d["not_a_field"] = 1
        with pytest.raises(TypeError):
            StudyProfile.from_dict(d)
