"""Period-based scoring (quarters, halves, innings).

Points are summed across all periods, including overtime periods appended
after a tied regulation.
"""

from __future__ import annotations

from typing import Collection, NamedTuple, Optional, Sequence

from .formats import PeriodFormat
from .units import UnitScore, as_units


class PeriodTotals(NamedTuple):
    our: int
    their: int

    @property
    def level(self) -> bool:
        return self.our == self.their

    @property
    def played(self) -> bool:
        return self.our > 0 or self.their > 0


def period_totals(unit_scores: Sequence) -> PeriodTotals:
    our = their = 0
    for score in as_units(unit_scores):
        our += score.our
        their += score.their
    return PeriodTotals(our, their)


def regulation_entered(
    fmt: PeriodFormat,
    unit_scores: Sequence,
    entered: Optional[Collection[int]] = None,
) -> bool:
    """True when every regular period and any overtime so far has a score.

    ``entered`` holds the indices the scorer has filled in; when omitted every
    unit present in ``unit_scores`` counts as entered.
    """

    count = len(unit_scores)
    if count < fmt.periods:
        return False
    if entered is None:
        return True
    return all(index in entered for index in range(count))


def overtime_due(
    fmt: PeriodFormat,
    unit_scores: Sequence,
    entered: Optional[Collection[int]] = None,
) -> bool:
    """Whether another overtime period should be offered.

    A 0-0 game is not tied for this purpose, it simply hasn't been played.
    """

    if not fmt.has_overtime:
        return False
    if not regulation_entered(fmt, unit_scores, entered):
        return False
    totals = period_totals(unit_scores)
    return totals.level and totals.played


def append_overtime(unit_scores: Sequence) -> list[UnitScore]:
    return as_units(unit_scores) + [UnitScore(0, 0)]


def unit_label(fmt: PeriodFormat, index: int) -> str:
    """Short display label for the 0-based unit ``index`` (``Q3``, ``OT``, ``OT2``)."""

    if index < fmt.periods:
        return f"{fmt.period_label}{index + 1}"
    extra = index - fmt.periods + 1
    return fmt.overtime_label if extra == 1 else f"{fmt.overtime_label}{extra}"


def drop_open_overtime(
    fmt: PeriodFormat,
    unit_scores: Sequence,
    entered: Collection[int],
) -> list[UnitScore]:
    """Remove a trailing overtime period that is no longer needed.

    Only an overtime period nobody has entered a score for is dropped, and
    only once the game is no longer tied going into it. Entered periods are
    never touched.
    """

    units = as_units(unit_scores)
    last = len(units) - 1
    if last < fmt.periods or last in entered or units[last].scored:
        return units
    if overtime_due(fmt, units[:last]):
        return units
    return units[:last]
