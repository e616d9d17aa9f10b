"""Per-set / per-period score values shared by the scoring engines."""

from __future__ import annotations

from typing import Any, Iterable, Literal, NamedTuple

Side = Literal["our", "their"]
SIDES: tuple[Side, Side] = ("our", "their")


class UnitScore(NamedTuple):
    our: int = 0
    their: int = 0

    @property
    def scored(self) -> bool:
        return self.our > 0 or self.their > 0

    def with_side(self, side: Side, value: int) -> "UnitScore":
        value = max(int(value), 0)
        return self._replace(our=value) if side == "our" else self._replace(their=value)

    def get(self, side: Side) -> int:
        return self.our if side == "our" else self.their


def as_unit(value: Any) -> UnitScore:
    """Normalise a dict, pair or object with ``our``/``their`` into a UnitScore.

    Missing values count as zero.
    """

    if isinstance(value, UnitScore):
        return value
    if isinstance(value, dict):
        our, their = value.get("our"), value.get("their")
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        our, their = value
    else:
        our, their = getattr(value, "our", None), getattr(value, "their", None)
    return UnitScore(int(our or 0), int(their or 0))


def as_units(values: Iterable[Any]) -> list[UnitScore]:
    return [as_unit(v) for v in values]
