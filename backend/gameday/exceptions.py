from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class GameNotFound(DomainException):
    def __init__(self, game_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Game not found",
            detail=f"game '{game_id}' not found",
            code="game_not_found",
        )


class GameAlreadyCompleted(DomainException):
    def __init__(self, game_id: str) -> None:
        super().__init__(
            status_code=409,
            title="Game already completed",
            detail=f"game '{game_id}' is not scheduled; it has already been completed",
            code="game_already_completed",
        )


class CompletionPartiallySaved(DomainException):
    def __init__(self, game_id: str, failed_step: str, saved_steps: list[str]) -> None:
        saved = ", ".join(saved_steps) if saved_steps else "nothing"
        super().__init__(
            status_code=500,
            title="Error completing game",
            detail=(
                f"game '{game_id}': {failed_step} could not be saved "
                f"(already saved: {saved})"
            ),
            code="completion_partial_failure",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
