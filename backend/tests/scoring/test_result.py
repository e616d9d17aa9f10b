import pytest

from gameday.scoring.formats import PeriodFormat, SCORING_CONFIGS, get_format
from gameday.scoring.result import (
    MatchResult,
    Outcome,
    PendingReason,
    evaluate_match,
    is_decided,
    offers_overtime,
    pending_reason,
    unit_labels,
    visible_unit_count,
)
from gameday.scoring.units import UnitScore

BEST_OF_3 = get_format("volleyball", "best_of_3")
TWO_SETS = get_format("volleyball", "two_sets")
QUARTERS = get_format("basketball", "four_quarters")
SOCCER = get_format("soccer", "two_halves")

NO_TIE_NO_OT = PeriodFormat(
    id="strict",
    name="Strict",
    description="No ties, no overtime",
    periods=2,
    period_label="H",
    period_name="Half",
)


def test_volleyball_three_set_win():
    result = evaluate_match(
        BEST_OF_3, [UnitScore(25, 20), UnitScore(22, 25), UnitScore(15, 10)]
    )
    assert result.outcome is Outcome.WIN
    assert (result.our_units_won, result.their_units_won) == (2, 1)
    assert (result.our_total_points, result.their_total_points) == (62, 55)
    assert result.point_differential == 7


def test_volleyball_straight_sets_loss():
    result = evaluate_match(BEST_OF_3, [UnitScore(18, 25), UnitScore(23, 25), UnitScore()])
    assert result.outcome is Outcome.LOSS
    assert (result.our_units_won, result.their_units_won) == (0, 2)


def test_volleyball_capped_set_counts_for_the_leader():
    result = evaluate_match(BEST_OF_3, [UnitScore(30, 29), UnitScore(25, 10)])
    assert result.outcome is Outcome.WIN


def test_volleyball_in_progress():
    result = evaluate_match(BEST_OF_3, [UnitScore(25, 20), UnitScore(12, 14), UnitScore()])
    assert result.outcome is Outcome.IN_PROGRESS
    assert not is_decided(BEST_OF_3, result)
    assert pending_reason(BEST_OF_3, [UnitScore(25, 20), UnitScore(12, 14)]) is (
        PendingReason.UNDECIDED
    )


def test_basketball_loss_without_overtime():
    units = [UnitScore(20, 18), UnitScore(15, 17), UnitScore(19, 19), UnitScore(17, 19)]
    result = evaluate_match(QUARTERS, units)
    assert (result.our_total_points, result.their_total_points) == (71, 73)
    assert result.outcome is Outcome.LOSS
    assert not offers_overtime(QUARTERS, units, range(4))


def test_basketball_overtime_decides_a_tied_game():
    regulation = [UnitScore(20, 20)] * 4
    assert evaluate_match(QUARTERS, regulation).outcome is Outcome.IN_PROGRESS
    assert offers_overtime(QUARTERS, regulation, range(4))
    assert pending_reason(QUARTERS, regulation, range(4)) is PendingReason.OVERTIME_REQUIRED

    result = evaluate_match(QUARTERS, regulation + [UnitScore(10, 8)])
    assert (result.our_total_points, result.their_total_points) == (90, 88)
    assert result.outcome is Outcome.WIN
    assert pending_reason(QUARTERS, regulation + [UnitScore(10, 8)], range(5)) is None


def test_soccer_draw():
    result = evaluate_match(SOCCER, [UnitScore(1, 0), UnitScore(1, 2)])
    assert result.outcome is Outcome.TIE
    assert is_decided(SOCCER, result)


def test_soccer_scoreless_game_is_not_a_draw():
    result = evaluate_match(SOCCER, [UnitScore(), UnitScore()])
    assert result.outcome is Outcome.IN_PROGRESS
    assert pending_reason(SOCCER, [UnitScore(), UnitScore()]) is PendingReason.NO_SCORES


def test_two_set_format_never_has_a_winner():
    result = evaluate_match(TWO_SETS, [UnitScore(25, 20), UnitScore(20, 25)])
    assert result.outcome is Outcome.NONE
    assert (result.our_units_won, result.their_units_won) == (0, 0)
    assert (result.our_total_points, result.their_total_points) == (45, 45)
    assert result.point_differential == 0
    assert is_decided(TWO_SETS, result)


@pytest.mark.parametrize(
    "units",
    [[], [UnitScore(25, 0), UnitScore(25, 0)], [UnitScore(3, 25), UnitScore(0, 25)]],
)
def test_two_set_format_outcome_ignores_scores(units):
    assert evaluate_match(TWO_SETS, units).outcome is Outcome.NONE


def test_tie_without_overtime_is_explained():
    units = [UnitScore(10, 12), UnitScore(12, 10)]
    assert evaluate_match(NO_TIE_NO_OT, units).outcome is Outcome.IN_PROGRESS
    assert pending_reason(NO_TIE_NO_OT, units) is PendingReason.UNRESOLVABLE_TIE
    assert pending_reason(NO_TIE_NO_OT, units, entered=[0]) is PendingReason.UNDECIDED


def test_pending_reason_messages():
    assert PendingReason.UNDECIDED.message == "Game must have a winner before completing."
    assert "overtime" in PendingReason.OVERTIME_REQUIRED.message.lower()


def test_period_differential_matches_outcome():
    for config in SCORING_CONFIGS.values():
        for fmt in config.formats:
            if not isinstance(fmt, PeriodFormat):
                continue
            for our, their in [(3, 1), (1, 3), (2, 2)]:
                units = [UnitScore(our, their)] + [UnitScore()] * (fmt.periods - 1)
                result = evaluate_match(fmt, units)
                assert result.point_differential == (
                    result.our_total_points - result.their_total_points
                )
                assert (result.outcome is Outcome.WIN) == (result.point_differential > 0)


def test_evaluation_is_repeatable():
    units = [UnitScore(25, 20), UnitScore(22, 25), UnitScore(15, 10)]
    assert evaluate_match(BEST_OF_3, units) == evaluate_match(BEST_OF_3, list(units))


def test_result_serialises_with_camel_case_keys():
    result = MatchResult(Outcome.WIN, 2, 1, 62, 55)
    assert result.to_dict() == {
        "outcome": "win",
        "ourUnitsWon": 2,
        "theirUnitsWon": 1,
        "ourTotalPoints": 62,
        "theirTotalPoints": 55,
        "pointDifferential": 7,
    }


def test_visible_units_and_labels():
    assert visible_unit_count(BEST_OF_3, []) == 2
    assert unit_labels(BEST_OF_3, 2) == ["Set 1", "Set 2"]
    assert visible_unit_count(QUARTERS, [UnitScore()] * 5) == 5
    assert unit_labels(QUARTERS, 5) == ["Q1", "Q2", "Q3", "Q4", "OT"]
