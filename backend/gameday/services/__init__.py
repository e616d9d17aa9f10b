"""Internal application services."""

from .validation import ValidationError, parse_score_input, validate_unit_scores
from .completion import (
    CompletionBlocked,
    CompletionState,
    GameContext,
    Stage,
    WorkflowError,
    start_completion,
)
from .game_completion import CompletionReport, complete_game, load_game_context

__all__ = [
    "ValidationError",
    "parse_score_input",
    "validate_unit_scores",
    "CompletionBlocked",
    "CompletionState",
    "GameContext",
    "Stage",
    "WorkflowError",
    "start_completion",
    "CompletionReport",
    "complete_game",
    "load_game_context",
]
