from gameday.scoring.formats import get_format
from gameday.scoring.periods import (
    append_overtime,
    drop_open_overtime,
    overtime_due,
    period_totals,
    regulation_entered,
    unit_label,
)
from gameday.scoring.units import UnitScore

QUARTERS = get_format("basketball", "four_quarters")
HALVES = get_format("soccer", "two_halves")
INNINGS = get_format("baseball", "seven_innings")


def test_totals_include_every_period():
    totals = period_totals(
        [UnitScore(20, 18), UnitScore(15, 17), UnitScore(19, 19), UnitScore(17, 19)]
    )
    assert totals == (71, 73)
    assert not totals.level
    assert totals.played


def test_zero_zero_is_not_played():
    totals = period_totals([UnitScore(), UnitScore()])
    assert totals.level
    assert not totals.played


def test_regulation_needs_every_period_entered():
    units = [UnitScore(20, 20)] * 4
    assert regulation_entered(QUARTERS, units)
    assert not regulation_entered(QUARTERS, units[:3])
    assert not regulation_entered(QUARTERS, units, entered={0, 1, 2})
    assert regulation_entered(QUARTERS, units, entered={0, 1, 2, 3})


def test_overtime_due_after_tied_regulation():
    units = [UnitScore(20, 20)] * 4
    assert overtime_due(QUARTERS, units, entered=range(4))


def test_no_overtime_when_not_tied():
    units = [UnitScore(20, 18), UnitScore(15, 17), UnitScore(19, 19), UnitScore(17, 19)]
    assert not overtime_due(QUARTERS, units, entered=range(4))


def test_no_overtime_for_unplayed_game():
    assert not overtime_due(QUARTERS, [UnitScore()] * 4, entered=range(4))


def test_no_overtime_when_format_allows_ties():
    assert not overtime_due(HALVES, [UnitScore(1, 1), UnitScore(1, 1)], entered=range(2))


def test_overtime_waits_for_the_open_overtime_period():
    units = append_overtime([UnitScore(20, 20)] * 4)
    assert not overtime_due(QUARTERS, units, entered=range(4))
    assert overtime_due(QUARTERS, units, entered=range(5))


def test_append_overtime_keeps_prior_scores():
    units = [UnitScore(20, 18), UnitScore(18, 20)]
    extended = append_overtime(units)
    assert extended == [UnitScore(20, 18), UnitScore(18, 20), UnitScore(0, 0)]
    assert units == [UnitScore(20, 18), UnitScore(18, 20)]


def test_unit_labels():
    assert unit_label(QUARTERS, 0) == "Q1"
    assert unit_label(QUARTERS, 3) == "Q4"
    assert unit_label(QUARTERS, 4) == "OT"
    assert unit_label(QUARTERS, 5) == "OT2"
    assert unit_label(INNINGS, 6) == "Inn7"
    assert unit_label(INNINGS, 7) == "X"


def test_drop_open_overtime_once_no_longer_tied():
    regulation = [UnitScore(20, 18), UnitScore(15, 17), UnitScore(19, 19), UnitScore(17, 18)]
    units = append_overtime(regulation)
    assert drop_open_overtime(QUARTERS, units, entered=range(4)) == regulation


def test_drop_open_overtime_keeps_what_is_still_needed():
    tied = append_overtime([UnitScore(20, 20)] * 4)
    assert len(drop_open_overtime(QUARTERS, tied, entered=range(4))) == 5

    entered = append_overtime([UnitScore(21, 20)] + [UnitScore(20, 20)] * 3)
    assert len(drop_open_overtime(QUARTERS, entered, entered=range(5))) == 5

    regulation = [UnitScore(20, 18)] * 4
    assert drop_open_overtime(QUARTERS, regulation, entered=range(4)) == regulation


def test_drop_open_overtime_when_regulation_is_cleared():
    units = append_overtime([UnitScore()] * 4)
    assert drop_open_overtime(QUARTERS, units, entered=range(4)) == [UnitScore()] * 4
