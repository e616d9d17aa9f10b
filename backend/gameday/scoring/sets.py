"""Set-based scoring (volleyball style).

Each set is played to a target score. With win-by-two the leader needs a two
point margin, unless the set has a point cap and the score has reached it, in
which case any lead ends the set. The match goes to the first side to win
``sets_to_win`` sets.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from .formats import SetFormat, set_rule
from .units import Side, UnitScore, as_units


class UnitOutcome(NamedTuple):
    complete: bool
    winner: Optional[Side]


OPEN = UnitOutcome(False, None)


def evaluate_unit(
    score: UnitScore, target: int, cap: Optional[int], win_by_two: bool
) -> UnitOutcome:
    """Decide whether a single set is over and who took it."""

    our, their = score
    high = max(our, their)
    if high < target:
        return OPEN
    if our == their:
        # Level scores never close a set, whatever the rule.
        return OPEN

    if win_by_two:
        diff = abs(our - their)
        capped = cap is not None and high >= cap
        if not capped and diff < 2:
            return OPEN

    return UnitOutcome(True, "our" if our > their else "their")


class SetTally(NamedTuple):
    our_sets: int
    their_sets: int
    our_points: int
    their_points: int
    sets_in_play: int
    decided: bool


def _needed(fmt: SetFormat) -> Optional[int]:
    return None if fmt.no_match_winner else fmt.sets_to_win


def tally_sets(fmt: SetFormat, unit_scores: Sequence) -> SetTally:
    """Accumulate set wins and points in order.

    Sets beyond ``max_sets`` are ignored, as is anything after the set that
    decided the match.
    """

    needed = _needed(fmt)
    our_sets = their_sets = our_points = their_points = 0
    in_play = 0
    decided = False

    for index, score in enumerate(as_units(unit_scores)[: fmt.max_sets]):
        in_play = index + 1
        target, cap = set_rule(fmt, index)
        outcome = evaluate_unit(score, target, cap, fmt.win_by_two)
        if outcome.winner == "our":
            our_sets += 1
        elif outcome.winner == "their":
            their_sets += 1
        our_points += score.our
        their_points += score.their

        if needed is not None and (our_sets >= needed or their_sets >= needed):
            decided = True
            break

    return SetTally(our_sets, their_sets, our_points, their_points, in_play, decided)


def visible_set_count(fmt: SetFormat, unit_scores: Sequence) -> int:
    """Number of set inputs to render.

    Once the match is decided only the sets that were played are shown.
    Otherwise every set with a score plus the next one, at least two, never
    more than ``max_sets``.
    """

    tally = tally_sets(fmt, unit_scores)
    if tally.decided:
        return tally.sets_in_play

    last_scored = 0
    for index, score in enumerate(as_units(unit_scores)[: fmt.max_sets]):
        if score.scored:
            last_scored = index + 1
    return min(max(last_scored + 1, 2), fmt.max_sets)
