"""
Tests for the lunar phase calculator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from nimbus.lunar import (
    PHASES,
    REFERENCE_NEW_MOON,
    SYNODIC_MONTH,
    illumination,
    moon_phase,
    next_full_moon,
    next_new_moon,
    phase_fraction,
    phase_name,
)


class TestMoonPhase:
    """Tests for moon_phase()."""

    def test_reference_new_moon(self):
        """Test the reference instant is a new moon."""
        phase = moon_phase(REFERENCE_NEW_MOON)
        assert phase.phase_fraction == pytest.approx(0.0, abs=1e-9)
        assert phase.illumination == pytest.approx(0.0)
        assert phase.name == "New Moon"
        assert phase.icon == "🌑"

    def test_full_moon(self):
        """Test half a synodic month after the reference."""
        phase = moon_phase(REFERENCE_NEW_MOON + SYNODIC_MONTH / 2)
        assert phase.phase_fraction == pytest.approx(0.5)
        assert phase.illumination == pytest.approx(100.0)
        assert phase.name == "Full Moon"
        assert phase.age_days == pytest.approx(14.765, abs=0.001)

    def test_first_quarter(self):
        """Test a quarter of a synodic month after the reference."""
        phase = moon_phase(REFERENCE_NEW_MOON + SYNODIC_MONTH / 4)
        assert phase.name == "First Quarter"
        assert phase.illumination == pytest.approx(50.0)

    def test_before_reference(self):
        """Test that dates before 2000 still give a fraction in [0, 1)."""
        fraction = phase_fraction(datetime(1969, 7, 20, 20, 17, tzinfo=timezone.utc))
        assert 0 <= fraction < 1

    def test_one_month_before_reference(self):
        """Test that a whole lunation earlier is also a new moon."""
        phase = moon_phase(REFERENCE_NEW_MOON - SYNODIC_MONTH)
        assert phase.name == "New Moon"
        assert phase.illumination == pytest.approx(0.0)

    def test_naive_is_utc(self):
        """Test that naive datetimes are read as UTC."""
        naive = datetime(2024, 3, 1, 12, 0)
        aware = naive.replace(tzinfo=timezone.utc)
        assert phase_fraction(naive) == phase_fraction(aware)

    def test_known_new_moon(self):
        """Test the 8 April 2024 new moon (total solar eclipse)."""
        phase = moon_phase(datetime(2024, 4, 8, 18, 21, tzinfo=timezone.utc))
        assert phase.name == "New Moon"
        assert phase.illumination < 5

    def test_illumination_one_decimal(self):
        """Test that illumination is rounded to one decimal place."""
        value = moon_phase(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)).illumination
        assert value == round(value, 1)
        assert 0 <= value <= 100


class TestPhaseTable:
    """Tests for the named-phase table."""

    def test_seventeen_intervals(self):
        assert len(PHASES) == 17

    def test_covers_unit_interval(self):
        """Test that intervals are contiguous from 0 to 1."""
        assert PHASES[0][0] == 0.0
        assert PHASES[-1][1] == 1.0
        for previous, current in zip(PHASES, PHASES[1:]):
            assert previous[1] == current[0]

    def test_new_moon_at_both_ends(self):
        assert PHASES[0][2] == "New Moon"
        assert PHASES[-1][2] == "New Moon"

    def test_eight_named_phases(self):
        """Test the eight base phases once Early/Mid/Late is stripped."""
        names = set()
        for _, _, name, _ in PHASES:
            for stage in ("Early ", "Mid ", "Late "):
                name = name.removeprefix(stage)
            names.add(name)
        assert len(names) == 8

    @pytest.mark.parametrize(
        "fraction, name",
        [
            (0.0, "New Moon"),
            (0.05, "Early Waxing Crescent"),
            (0.12, "Mid Waxing Crescent"),
            (0.2, "Late Waxing Crescent"),
            (0.25, "First Quarter"),
            (0.38, "Mid Waxing Gibbous"),
            (0.5, "Full Moon"),
            (0.65, "Mid Waning Gibbous"),
            (0.75, "Last Quarter"),
            (0.95, "Late Waning Crescent"),
            (0.99, "New Moon"),
        ],
    )
    def test_phase_name(self, fraction, name):
        assert phase_name(fraction)[0] == name

    def test_fallback(self):
        """Test that out-of-range fractions fall back to new moon."""
        assert phase_name(1.5) == ("New Moon", "🌑")

    def test_illumination_curve(self):
        assert illumination(0) == 0.0
        assert illumination(0.5) == 100.0
        assert illumination(0.25) == pytest.approx(50.0)


class TestNextPhases:
    """Tests for next new and full moon."""

    def test_next_full_moon(self):
        expected = REFERENCE_NEW_MOON + SYNODIC_MONTH / 2
        result = next_full_moon(REFERENCE_NEW_MOON)
        assert abs(result - expected) < timedelta(seconds=1)

    def test_next_new_moon_is_strictly_after(self):
        """Test that a new moon instant returns the following new moon."""
        expected = REFERENCE_NEW_MOON + SYNODIC_MONTH
        result = next_new_moon(REFERENCE_NEW_MOON)
        assert abs(result - expected) < timedelta(seconds=1)

    def test_next_new_moon_from_full(self):
        start = REFERENCE_NEW_MOON + SYNODIC_MONTH / 2
        result = next_new_moon(start)
        assert abs(result - (REFERENCE_NEW_MOON + SYNODIC_MONTH)) < timedelta(seconds=1)
