"""Tests for resolving a coach's effective working hours per date."""

from datetime import date

import pytest

from coachcal.scheduling.errors import InvalidRangeError, InvalidTimeFormat
from coachcal.scheduling.working_hours import (
    DEFAULT_WORKING_HOURS,
    EffectiveHours,
    derive_working_days,
    effective_hours_for,
    normalise_overrides,
    validate_working_hours,
)
from coachcal.schemas.working_hours import WEEKDAYS, CustomDayOverride, WorkingHours

TUESDAY = date(2024, 3, 5)
SATURDAY = date(2024, 3, 9)
SUNDAY = date(2024, 3, 10)

WEEKDAYS_ONLY = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


class TestGlobalHours:
    def test_enabled_day(self) -> None:
        wh = WorkingHours(start_time="9:00 AM", end_time="5:00 PM", working_days=WEEKDAYS_ONLY)
        assert effective_hours_for(TUESDAY, wh) == EffectiveHours(540, 1020, 60)

    def test_disabled_day(self) -> None:
        wh = WorkingHours(start_time="9:00 AM", end_time="5:00 PM", working_days=WEEKDAYS_ONLY)
        assert effective_hours_for(SATURDAY, wh) is None

    def test_interval_carried_through(self) -> None:
        wh = WorkingHours(slot_interval_minutes=30)
        assert effective_hours_for(TUESDAY, wh).interval_minutes == 30

    def test_defaults_are_every_day_9_to_6(self) -> None:
        assert DEFAULT_WORKING_HOURS.working_days == list(WEEKDAYS)
        assert effective_hours_for(SUNDAY, DEFAULT_WORKING_HOURS) == EffectiveHours(540, 1080, 60)

    def test_end_not_after_start_is_unavailable(self) -> None:
        wh = WorkingHours(start_time="5:00 PM", end_time="9:00 AM")
        assert effective_hours_for(TUESDAY, wh) is None

    def test_malformed_time_raises(self) -> None:
        wh = WorkingHours(start_time="nine", end_time="5:00 PM")
        with pytest.raises(InvalidTimeFormat):
            effective_hours_for(TUESDAY, wh)


class TestOverrides:
    def test_override_replaces_global_range(self) -> None:
        wh = WorkingHours(
            start_time="9:00 AM",
            end_time="5:00 PM",
            custom_working_hours={
                "Tuesday": CustomDayOverride(start_time="1:00 PM", end_time="4:00 PM"),
            },
        )
        assert effective_hours_for(TUESDAY, wh) == EffectiveHours(780, 960, 60)

    def test_disabled_override_wins_over_working_days(self) -> None:
        wh = WorkingHours(
            working_days=list(WEEKDAYS),
            custom_working_hours={
                "Tuesday": CustomDayOverride(
                    enabled=False, start_time="9:00 AM", end_time="5:00 PM"
                ),
            },
        )
        assert effective_hours_for(TUESDAY, wh) is None

    def test_missing_override_days_filled_from_global(self) -> None:
        wh = WorkingHours(
            start_time="8:00 AM",
            end_time="4:00 PM",
            working_days=WEEKDAYS_ONLY,
            custom_working_hours={
                "Tuesday": CustomDayOverride(start_time="1:00 PM", end_time="4:00 PM"),
            },
        )
        overrides = normalise_overrides(wh)
        assert set(overrides) == set(WEEKDAYS)
        assert overrides["Monday"] == CustomDayOverride(
            enabled=True, start_time="8:00 AM", end_time="4:00 PM"
        )
        assert overrides["Saturday"].enabled is False

    def test_working_days_derived_from_overrides(self) -> None:
        wh = WorkingHours(
            working_days=["Monday"],
            custom_working_hours={
                day: CustomDayOverride(
                    enabled=day in ("Wednesday", "Friday"),
                    start_time="9:00 AM",
                    end_time="5:00 PM",
                )
                for day in WEEKDAYS
            },
        )
        assert derive_working_days(wh) == ["Wednesday", "Friday"]

    def test_without_overrides_working_days_pass_through(self) -> None:
        wh = WorkingHours(working_days=["Friday", "Monday"])
        assert derive_working_days(wh) == ["Monday", "Friday"]


class TestValidateWorkingHours:
    def test_valid(self) -> None:
        validate_working_hours(WorkingHours(start_time="9:00 AM", end_time="5:00 PM"))

    def test_global_range_inverted(self) -> None:
        with pytest.raises(InvalidRangeError):
            validate_working_hours(WorkingHours(start_time="5:00 PM", end_time="9:00 AM"))

    def test_equal_start_and_end(self) -> None:
        with pytest.raises(InvalidRangeError):
            validate_working_hours(WorkingHours(start_time="9:00 AM", end_time="9:00 AM"))

    def test_enabled_override_checked(self) -> None:
        wh = WorkingHours(
            custom_working_hours={
                "Friday": CustomDayOverride(start_time="3:00 PM", end_time="1:00 PM"),
            },
        )
        with pytest.raises(InvalidRangeError) as exc_info:
            validate_working_hours(wh)
        assert exc_info.value.day == "Friday"

    def test_disabled_override_not_checked(self) -> None:
        wh = WorkingHours(
            custom_working_hours={
                "Friday": CustomDayOverride(
                    enabled=False, start_time="3:00 PM", end_time="1:00 PM"
                ),
            },
        )
        validate_working_hours(wh)

    def test_malformed_time(self) -> None:
        with pytest.raises(InvalidTimeFormat):
            validate_working_hours(WorkingHours(start_time="9am", end_time="5:00 PM"))
