"""Canonical match outcome for any scoring format.

``evaluate_match`` is a pure function of the format and the unit scores; it
is safe to call on every score edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Dict, Optional, Sequence

from .formats import PeriodFormat, ScoringFormat, SetFormat
from .periods import overtime_due, period_totals, regulation_entered, unit_label
from .sets import tally_sets, visible_set_count
from .units import as_units


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"
    NONE = "none"
    IN_PROGRESS = "in_progress"


DECIDED_OUTCOMES = frozenset({Outcome.WIN, Outcome.LOSS, Outcome.TIE})


@dataclass(frozen=True)
class MatchResult:
    outcome: Outcome
    our_units_won: int
    their_units_won: int
    our_total_points: int
    their_total_points: int

    @property
    def point_differential(self) -> int:
        return self.our_total_points - self.their_total_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "ourUnitsWon": self.our_units_won,
            "theirUnitsWon": self.their_units_won,
            "ourTotalPoints": self.our_total_points,
            "theirTotalPoints": self.their_total_points,
            "pointDifferential": self.point_differential,
        }


class PendingReason(str, Enum):
    NO_SCORES = "no_scores"
    UNDECIDED = "undecided"
    OVERTIME_REQUIRED = "overtime_required"
    UNRESOLVABLE_TIE = "unresolvable_tie"

    @property
    def message(self) -> str:
        return _PENDING_MESSAGES[self]


_PENDING_MESSAGES = {
    PendingReason.NO_SCORES: "Enter scores before completing the game.",
    PendingReason.UNDECIDED: "Game must have a winner before completing.",
    PendingReason.OVERTIME_REQUIRED: (
        "Regulation ended tied. Enter the overtime score to decide the game."
    ),
    PendingReason.UNRESOLVABLE_TIE: (
        "This format cannot end in a tie and has no overtime. "
        "Choose a format that allows a tie or overtime."
    ),
}


def _set_result(fmt: SetFormat, unit_scores: Sequence) -> MatchResult:
    if fmt.no_match_winner:
        units = as_units(unit_scores)[: fmt.max_sets]
        return MatchResult(
            Outcome.NONE,
            0,
            0,
            sum(u.our for u in units),
            sum(u.their for u in units),
        )

    tally = tally_sets(fmt, unit_scores)
    outcome = Outcome.IN_PROGRESS
    if tally.our_sets >= fmt.sets_to_win:
        outcome = Outcome.WIN
    elif tally.their_sets >= fmt.sets_to_win:
        outcome = Outcome.LOSS
    return MatchResult(
        outcome,
        tally.our_sets,
        tally.their_sets,
        tally.our_points,
        tally.their_points,
    )


def _period_result(fmt: PeriodFormat, unit_scores: Sequence) -> MatchResult:
    totals = period_totals(unit_scores)
    if totals.our > totals.their:
        outcome = Outcome.WIN
    elif totals.their > totals.our:
        outcome = Outcome.LOSS
    elif fmt.allow_tie and totals.played:
        outcome = Outcome.TIE
    else:
        outcome = Outcome.IN_PROGRESS
    return MatchResult(outcome, 0, 0, totals.our, totals.their)


def evaluate_match(fmt: ScoringFormat, unit_scores: Sequence) -> MatchResult:
    if isinstance(fmt, SetFormat):
        return _set_result(fmt, unit_scores)
    if isinstance(fmt, PeriodFormat):
        return _period_result(fmt, unit_scores)
    raise TypeError(f"unsupported scoring format: {fmt!r}")


def is_decided(fmt: ScoringFormat, result: MatchResult) -> bool:
    """Whether a game with this result may be completed."""

    if isinstance(fmt, SetFormat) and fmt.no_match_winner:
        return True
    return result.outcome in DECIDED_OUTCOMES


def pending_reason(
    fmt: ScoringFormat,
    unit_scores: Sequence,
    entered: Optional[Collection[int]] = None,
) -> Optional[PendingReason]:
    """Explain why a game cannot be completed yet, or ``None`` if it can."""

    result = evaluate_match(fmt, unit_scores)
    if is_decided(fmt, result):
        return None
    if result.our_total_points == 0 and result.their_total_points == 0:
        return PendingReason.NO_SCORES
    if isinstance(fmt, SetFormat):
        return PendingReason.UNDECIDED
    if isinstance(fmt, PeriodFormat):
        finished = regulation_entered(fmt, unit_scores, entered)
        in_overtime = len(unit_scores) > fmt.periods
        if fmt.has_overtime and (finished or in_overtime):
            return PendingReason.OVERTIME_REQUIRED
        if not finished:
            return PendingReason.UNDECIDED
        return PendingReason.UNRESOLVABLE_TIE
    raise TypeError(f"unsupported scoring format: {fmt!r}")


def visible_unit_count(fmt: ScoringFormat, unit_scores: Sequence) -> int:
    """How many set/period inputs to show for the current scores."""

    if isinstance(fmt, SetFormat):
        return visible_set_count(fmt, unit_scores)
    if isinstance(fmt, PeriodFormat):
        return max(len(unit_scores), fmt.periods)
    raise TypeError(f"unsupported scoring format: {fmt!r}")


def unit_labels(fmt: ScoringFormat, count: int) -> list[str]:
    if isinstance(fmt, SetFormat):
        return [f"Set {i + 1}" for i in range(count)]
    if isinstance(fmt, PeriodFormat):
        return [unit_label(fmt, i) for i in range(count)]
    raise TypeError(f"unsupported scoring format: {fmt!r}")


def offers_overtime(
    fmt: ScoringFormat,
    unit_scores: Sequence,
    entered: Optional[Collection[int]] = None,
) -> bool:
    return isinstance(fmt, PeriodFormat) and overtime_due(fmt, unit_scores, entered)
