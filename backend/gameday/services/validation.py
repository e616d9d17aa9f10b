import re
from typing import Any, List, Optional, Sequence

from ..config import MAX_UNIT_SCORE
from ..scoring.units import UnitScore

_NON_DIGITS = re.compile(r"\D")


class ValidationError(Exception):
    """Raised when submitted unit scores are invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def parse_score_input(raw: Any) -> int:
    """Turn raw score-box text into a score.

    Non-digit keystrokes are dropped and an empty box reads as zero, so the
    result is always a non-negative integer.
    """

    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise ValidationError("Score must be a number (not a boolean).")
    if isinstance(raw, int):
        return max(raw, 0)
    digits = _NON_DIGITS.sub("", str(raw))
    return int(digits) if digits else 0


def _side_value(index: int, label: str, raw: Any, max_points: Optional[int]) -> int:
    if isinstance(raw, bool):
        raise ValidationError(
            f"Unit #{index} {label} score must be an integer (not a boolean)."
        )
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Unit #{index} {label} score must be an integer.")
    if value != raw and not isinstance(raw, str):
        raise ValidationError(f"Unit #{index} {label} score must be an integer.")
    if value < 0:
        raise ValidationError(f"Unit #{index} scores must be >= 0.")
    if max_points is not None and value > max_points:
        raise ValidationError(f"Unit #{index} scores must be <= {max_points}.")
    return value


def validate_unit_scores(
    units: Sequence[Any],
    *,
    max_units: Optional[int] = None,
    max_points_per_side: Optional[int] = MAX_UNIT_SCORE,
) -> List[UnitScore]:
    """Validate a list of ``{our, their}`` unit scores.

    Rules:
    - Must be a list; it may be empty (nothing entered yet)
    - Number of units must be <= ``max_units`` (if provided)
    - Each unit must be an object with ``our`` and ``their``
    - Scores must be integers >= 0 (booleans are rejected)
    - Scores must be <= ``max_points_per_side`` (if provided)
    """

    if not isinstance(units, (list, tuple)):
        raise ValidationError("Unit scores must be a list.")
    if max_units is not None and len(units) > max_units:
        raise ValidationError(f"Too many units. Max allowed is {max_units}.")

    normalized: List[UnitScore] = []
    for i, unit in enumerate(units, start=1):
        if isinstance(unit, UnitScore):
            our, their = unit
        elif isinstance(unit, dict):
            if "our" not in unit or "their" not in unit:
                raise ValidationError(f"Unit #{i} must include both our and their.")
            our, their = unit["our"], unit["their"]
        else:
            raise ValidationError(f"Unit #{i} must be an object with fields our and their.")
        normalized.append(
            UnitScore(
                _side_value(i, "our", our, max_points_per_side),
                _side_value(i, "their", their, max_points_per_side),
            )
        )
    return normalized
