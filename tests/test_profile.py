# tests/test_profile.py

import json
from datetime import datetime, timezone

import pytest

from pharmashe.core.domain import UserProfile
from pharmashe.logic.profile import (
    bmi_category,
    compute_bmi,
    has_content,
    parse_number,
    profile_bmi,
)
from pharmashe.service.profile_store import ProfileStore


class TestParseNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [("165", 165.0), ("65.5", 65.5), ("abc", 0.0), ("", 0.0), ("-5", 0.0),
         ("0", 0.0), ("inf", 0.0), ("nan", 0.0), (None, 0.0)],
    )
    def test_values(self, value, expected):
        assert parse_number(value) == expected


class TestBMI:
    def test_compute(self):
        assert compute_bmi(165, 65) == 23.9

    def test_missing_inputs(self):
        assert compute_bmi(0, 65) is None
        assert compute_bmi(165, 0) is None

    @pytest.mark.parametrize(
        "bmi, category",
        [(18.4, "Underweight"), (18.5, "Normal"), (24.9, "Normal"),
         (25.0, "Overweight"), (29.9, "Overweight"), (30.0, "Obese")],
    )
    def test_category(self, bmi, category):
        assert bmi_category(bmi) == category

    def test_profile_bmi(self):
        assert profile_bmi(UserProfile(height_cm="165", weight_kg="65")) == 23.9
        assert profile_bmi(UserProfile(height_cm="165")) is None


class TestHasContent:
    def test_empty(self):
        assert has_content(None) is False
        assert has_content(UserProfile()) is False
        assert has_content(UserProfile(concerns="   ")) is False

    def test_any_field(self):
        assert has_content(UserProfile(concerns="breastfeeding")) is True
        assert has_content(UserProfile(weight_kg="60")) is True

    def test_saved_at_alone_is_not_content(self):
        assert has_content(UserProfile(saved_at="2026-01-01T00:00:00+00:00")) is False


class TestProfileStore:
    @pytest.fixture
    def store(self, tmp_path):
        return ProfileStore(tmp_path / "nested" / "profile.json")

    def test_missing_file_loads_empty(self, store):
        assert store.load() == UserProfile()

    def test_save_and_load(self, store):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        profile = UserProfile(height_cm="165", underlying_conditions="hypertension")

        saved = store.save(profile, now=now)

        assert saved.saved_at == "2026-01-01T00:00:00+00:00"
        assert profile.saved_at == ""
        assert store.load() == saved

    def test_corrupt_file_loads_empty(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")
        assert store.load() == UserProfile()

    def test_non_object_loads_empty(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("[1, 2]", encoding="utf-8")
        assert store.load() == UserProfile()

    def test_unknown_keys_ignored(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps({"heightCm": "1", "weight_kg": "60", "concerns": None}),
            encoding="utf-8",
        )
        assert store.load() == UserProfile(weight_kg="60")

    def test_clear(self, store):
        store.save(UserProfile(concerns="x"))
        store.clear()
        assert not store.path.exists()
        store.clear()
