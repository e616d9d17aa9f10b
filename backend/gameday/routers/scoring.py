from fastapi import APIRouter

from ..exceptions import ProblemDetail, http_problem
from ..schemas import EvaluateIn, EvaluateOut, MatchResultOut
from ..scoring.formats import SetFormat, UnknownFormat, UnknownSport, get_format
from ..scoring.result import (
    MatchResult,
    evaluate_match,
    is_decided,
    offers_overtime,
    pending_reason,
    unit_labels,
    visible_unit_count,
)
from ..services.validation import ValidationError, validate_unit_scores

router = APIRouter(prefix="/scoring", tags=["scoring"], responses={422: {"model": ProblemDetail}})


def result_out(result: MatchResult) -> MatchResultOut:
    return MatchResultOut(**result.to_dict())


# POST /api/v0/scoring/evaluate
@router.post("/evaluate", response_model=EvaluateOut)
async def evaluate_scores(body: EvaluateIn) -> EvaluateOut:
    try:
        fmt = get_format(body.sport, body.formatId)
    except (UnknownSport, UnknownFormat) as exc:
        raise http_problem(
            status_code=404,
            detail=str(exc),
            code="scoring_format_not_found",
        )

    max_units = fmt.max_sets if isinstance(fmt, SetFormat) else None
    try:
        units = validate_unit_scores(body.unitScores, max_units=max_units)
    except ValidationError as e:
        raise http_problem(
            status_code=422,
            detail=str(e),
            code="scoring_validation_error",
        )

    result = evaluate_match(fmt, units)
    reason = pending_reason(fmt, units, body.enteredUnits)
    visible = visible_unit_count(fmt, units)
    return EvaluateOut(
        result=result_out(result),
        visibleUnits=visible,
        unitLabels=unit_labels(fmt, visible),
        overtimeDue=offers_overtime(fmt, units, body.enteredUnits),
        canComplete=is_decided(fmt, result),
        pendingReason=reason.value if reason else None,
        notice=reason.message if reason else None,
    )
