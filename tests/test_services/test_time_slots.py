"""
Tests de l'arithmétique des créneaux HH:mm.
"""

import pytest

from app.services.scheduling import (
    InvalidDurationError,
    InvalidTimeFormatError,
    TimeSlot,
    duration_minutes,
    parse_minutes,
    validate_slot,
)


class TestParseMinutes:

    @pytest.mark.parametrize("value, expected", [
        ("00:00", 0),
        ("09:30", 570),
        ("23:59", 1439),
    ])
    def test_valid_times(self, value, expected):
        assert parse_minutes(value) == expected

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "0930", "", "ab:cd", "09:30:00"])
    def test_invalid_times(self, value):
        with pytest.raises(InvalidTimeFormatError):
            parse_minutes(value)

    def test_duration(self):
        assert duration_minutes("09:00", "10:30") == 90
        assert duration_minutes("10:00", "09:00") == -60


class TestValidateSlot:

    def test_ten_minutes_rejected(self):
        with pytest.raises(InvalidDurationError) as exc:
            validate_slot("09:00", "09:10")
        assert exc.value.message == "Durée minimum: 15 minutes"

    def test_fifteen_minutes_accepted(self):
        slot = validate_slot("09:00", "09:15")
        assert slot.duration == 15

    def test_three_hours_accepted(self):
        assert validate_slot("08:00", "11:00").duration == 180

    def test_181_minutes_rejected(self):
        with pytest.raises(InvalidDurationError) as exc:
            validate_slot("08:00", "11:01")
        assert exc.value.message == "Durée maximum: 3 heures"

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidDurationError) as exc:
            validate_slot("10:00", "09:00")
        assert exc.value.message == "L'heure de fin doit être après l'heure de début"

    def test_equal_times_rejected(self):
        with pytest.raises(InvalidDurationError):
            validate_slot("10:00", "10:00")

    def test_format_checked_before_duration(self):
        with pytest.raises(InvalidTimeFormatError):
            validate_slot("9:00", "08:00")

    def test_errors_are_validation_errors(self):
        with pytest.raises(InvalidDurationError) as exc:
            validate_slot("09:00", "09:05")
        assert exc.value.kind == "validation_error"
        assert exc.value.status_code == 400

    def test_custom_bounds(self):
        assert validate_slot("09:00", "09:05", min_duration=5).duration == 5
        with pytest.raises(InvalidDurationError):
            validate_slot("09:00", "10:00", max_duration=30)


class TestOverlap:

    def test_overlapping_slots(self):
        existing = TimeSlot("09:00", "10:00")
        assert existing.overlaps(TimeSlot("09:30", "10:30"))
        assert existing.overlaps(TimeSlot("08:30", "09:15"))
        assert existing.overlaps(TimeSlot("09:15", "09:45"))
        assert existing.overlaps(TimeSlot("08:00", "11:00"))

    def test_touching_slots_do_not_overlap(self):
        existing = TimeSlot("09:00", "10:00")
        assert not existing.overlaps(TimeSlot("10:00", "11:00"))
        assert not existing.overlaps(TimeSlot("08:00", "09:00"))

    def test_overlap_is_symmetric(self):
        a = TimeSlot("09:00", "09:30")
        b = TimeSlot("09:15", "09:45")
        assert a.overlaps(b) and b.overlaps(a)
