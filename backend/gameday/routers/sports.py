from __future__ import annotations

from fastapi import APIRouter

from ..exceptions import ProblemDetail, http_problem
from ..schemas import PeriodFormatOut, ScoringFormatOut, SetFormatOut, SportOut
from ..scoring.formats import (
    PeriodFormat,
    ScoringFormat,
    SetFormat,
    SportConfig,
    UnknownSport,
    get_sport_config,
    list_sports,
)

router = APIRouter(prefix="/sports", tags=["sports"], responses={404: {"model": ProblemDetail}})


def format_out(fmt: ScoringFormat) -> ScoringFormatOut:
    if isinstance(fmt, SetFormat):
        return SetFormatOut(
            id=fmt.id,
            name=fmt.name,
            description=fmt.description,
            setsToWin=fmt.sets_to_win,
            maxSets=fmt.max_sets,
            setTargets=list(fmt.set_targets),
            setCaps=list(fmt.set_caps),
            winByTwo=fmt.win_by_two,
            noMatchWinner=fmt.no_match_winner,
        )
    if isinstance(fmt, PeriodFormat):
        return PeriodFormatOut(
            id=fmt.id,
            name=fmt.name,
            description=fmt.description,
            periods=fmt.periods,
            periodLabel=fmt.period_label,
            periodName=fmt.period_name,
            hasOvertime=fmt.has_overtime,
            overtimeLabel=fmt.overtime_label,
            allowTie=fmt.allow_tie,
        )
    raise TypeError(f"unsupported scoring format: {fmt!r}")


def _sport_out(config: SportConfig) -> SportOut:
    return SportOut(
        id=config.id,
        name=config.name,
        icon=config.icon,
        isSetBased=config.is_set_based,
        formats=[format_out(fmt) for fmt in config.formats],
    )


# GET /api/v0/sports
@router.get("", response_model=list[SportOut])
async def list_configured_sports() -> list[SportOut]:
    return [_sport_out(config) for config in list_sports()]


# GET /api/v0/sports/{sport}/formats
@router.get("/{sport}/formats", response_model=list[ScoringFormatOut])
async def list_formats(sport: str) -> list[ScoringFormatOut]:
    try:
        config = get_sport_config(sport)
    except UnknownSport as exc:
        raise http_problem(
            status_code=404,
            detail=str(exc),
            code="sport_not_configured",
        )
    return [format_out(fmt) for fmt in config.formats]
