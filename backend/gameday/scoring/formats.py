"""Scoring format catalog.

Each sport exposes one or more scoring formats. A format is either set based
(volleyball: sets to a target score, optional win-by-two and point caps) or
period based (quarters, halves, innings: points summed across periods with
optional overtime).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple, Union


class UnknownSport(LookupError):
    def __init__(self, sport: str) -> None:
        super().__init__(f"sport '{sport}' has no scoring configuration")
        self.sport = sport


class UnknownFormat(LookupError):
    def __init__(self, sport: str, format_id: str) -> None:
        super().__init__(f"format '{format_id}' is not available for {sport}")
        self.sport = sport
        self.format_id = format_id


@dataclass(frozen=True)
class SetFormat:
    id: str
    name: str
    description: str
    sets_to_win: Optional[int]
    max_sets: int
    set_targets: Tuple[int, ...]
    set_caps: Tuple[Optional[int], ...]
    win_by_two: bool = True
    no_match_winner: bool = False
    kind: Literal["sets"] = field(default="sets", init=False)

    def __post_init__(self) -> None:
        if self.max_sets < 1:
            raise ValueError("max_sets must be at least 1")
        if len(self.set_targets) != self.max_sets or len(self.set_caps) != self.max_sets:
            raise ValueError(
                f"{self.id}: set_targets and set_caps must both hold {self.max_sets} entries"
            )
        if self.no_match_winner != (self.sets_to_win is None):
            raise ValueError(
                f"{self.id}: sets_to_win must be None exactly when no_match_winner is set"
            )


@dataclass(frozen=True)
class PeriodFormat:
    id: str
    name: str
    description: str
    periods: int
    period_label: str
    period_name: str
    has_overtime: bool = False
    overtime_label: str = "OT"
    allow_tie: bool = False
    kind: Literal["periods"] = field(default="periods", init=False)

    def __post_init__(self) -> None:
        if self.periods < 1:
            raise ValueError("periods must be at least 1")


ScoringFormat = Union[SetFormat, PeriodFormat]


@dataclass(frozen=True)
class SportConfig:
    id: str
    name: str
    icon: str
    formats: Tuple[ScoringFormat, ...]

    @property
    def is_set_based(self) -> bool:
        return isinstance(self.formats[0], SetFormat)


def _quarters(**overrides) -> PeriodFormat:
    values = dict(
        id="four_quarters",
        name="4 Quarters",
        description="Standard game",
        periods=4,
        period_label="Q",
        period_name="Quarter",
    )
    values.update(overrides)
    return PeriodFormat(**values)


def _innings(periods: int, description: str) -> PeriodFormat:
    words = {5: "five", 6: "six", 7: "seven", 9: "nine"}
    return PeriodFormat(
        id=f"{words[periods]}_innings",
        name=f"{periods} Innings",
        description=description,
        periods=periods,
        period_label="Inn",
        period_name="Inning",
        has_overtime=True,
        overtime_label="X",
    )


SCORING_CONFIGS: dict[str, SportConfig] = {
    "volleyball": SportConfig(
        id="volleyball",
        name="Volleyball",
        icon="🏐",
        formats=(
            SetFormat(
                id="best_of_3",
                name="Best of 3 Sets",
                description="Youth/Recreational - First to win 2 sets",
                sets_to_win=2,
                max_sets=3,
                set_targets=(25, 25, 15),
                set_caps=(30, 30, 20),
            ),
            SetFormat(
                id="best_of_5",
                name="Best of 5 Sets",
                description="Competitive/High School - First to win 3 sets",
                sets_to_win=3,
                max_sets=5,
                set_targets=(25, 25, 25, 25, 15),
                set_caps=(30, 30, 30, 30, 20),
            ),
            SetFormat(
                id="two_sets",
                name="2 Sets (No Winner)",
                description="Recreational - Play 2 sets, no match winner",
                sets_to_win=None,
                max_sets=2,
                set_targets=(25, 25),
                set_caps=(30, 30),
                no_match_winner=True,
            ),
            SetFormat(
                id="rally_scoring",
                name="Rally to 21",
                description="Quick format - Sets to 21",
                sets_to_win=2,
                max_sets=3,
                set_targets=(21, 21, 15),
                set_caps=(25, 25, 20),
            ),
        ),
    ),
    "basketball": SportConfig(
        id="basketball",
        name="Basketball",
        icon="🏀",
        formats=(
            _quarters(description="Standard game with 4 quarters", has_overtime=True),
            PeriodFormat(
                id="two_halves",
                name="2 Halves",
                description="College/simplified format",
                periods=2,
                period_label="H",
                period_name="Half",
                has_overtime=True,
            ),
        ),
    ),
    "soccer": SportConfig(
        id="soccer",
        name="Soccer",
        icon="⚽",
        formats=(
            PeriodFormat(
                id="two_halves",
                name="2 Halves",
                description="Standard soccer match",
                periods=2,
                period_label="H",
                period_name="Half",
                allow_tie=True,
            ),
            _quarters(description="Youth format with quarters", allow_tie=True),
        ),
    ),
    "baseball": SportConfig(
        id="baseball",
        name="Baseball",
        icon="⚾",
        formats=(
            _innings(6, "Youth baseball (Little League)"),
            _innings(7, "Middle/High school"),
            _innings(9, "Standard baseball"),
        ),
    ),
    "softball": SportConfig(
        id="softball",
        name="Softball",
        icon="🥎",
        formats=(
            _innings(5, "Youth softball"),
            _innings(7, "Standard softball"),
        ),
    ),
    "football": SportConfig(
        id="football",
        name="Football",
        icon="🏈",
        formats=(_quarters(has_overtime=True),),
    ),
    "hockey": SportConfig(
        id="hockey",
        name="Hockey",
        icon="🏒",
        formats=(
            PeriodFormat(
                id="three_periods",
                name="3 Periods",
                description="Standard hockey game",
                periods=3,
                period_label="P",
                period_name="Period",
                has_overtime=True,
            ),
        ),
    ),
}


def list_sports() -> list[SportConfig]:
    return sorted(SCORING_CONFIGS.values(), key=lambda cfg: cfg.name.lower())


def get_sport_config(sport: str) -> SportConfig:
    """Return the configuration for ``sport`` (case-insensitive).

    Sports without a configuration are rejected rather than mapped onto a
    default so that scores are never judged by another sport's rules.
    """

    config = SCORING_CONFIGS.get((sport or "").strip().lower())
    if config is None:
        raise UnknownSport(sport)
    return config


def formats_for_sport(sport: str) -> Tuple[ScoringFormat, ...]:
    return get_sport_config(sport).formats


def get_format(sport: str, format_id: str) -> ScoringFormat:
    for fmt in formats_for_sport(sport):
        if fmt.id == format_id:
            return fmt
    raise UnknownFormat(sport, format_id)


def default_format(sport: str) -> ScoringFormat:
    return formats_for_sport(sport)[0]


def set_rule(fmt: SetFormat, index: int) -> Tuple[int, Optional[int]]:
    """Return ``(target, cap)`` for the 0-based set ``index``."""

    return fmt.set_targets[index], fmt.set_caps[index]
