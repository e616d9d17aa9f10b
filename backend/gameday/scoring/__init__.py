"""Scoring engines for set-based and period-based game formats."""

from . import formats, periods, result, sets
from .formats import (
    PeriodFormat,
    ScoringFormat,
    SetFormat,
    SportConfig,
    UnknownFormat,
    UnknownSport,
    get_format,
    get_sport_config,
)
from .result import MatchResult, Outcome, PendingReason, evaluate_match
from .units import UnitScore

__all__ = [
    "formats",
    "periods",
    "result",
    "sets",
    "MatchResult",
    "Outcome",
    "PendingReason",
    "PeriodFormat",
    "ScoringFormat",
    "SetFormat",
    "SportConfig",
    "UnitScore",
    "UnknownFormat",
    "UnknownSport",
    "evaluate_match",
    "get_format",
    "get_sport_config",
]
