"""References to workouts and exercises inside a plan document.

A workout or exercise can be addressed either by its position in the
parent array or by its stored identifier.  Callers pass whatever they
received (usually a string from a route or query string) to
:func:`parse_ref` once, and every later lookup or URL uses the resulting
:class:`IndexRef` / :class:`IdRef` instead of re-checking whether the value
looks numeric.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IndexRef:
    """Positional reference into an array."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class IdRef:
    """Reference by stored ``_id`` / ``id``."""

    value: str

    def __str__(self) -> str:
        return self.value


Ref = Union[IndexRef, IdRef]


def parse_ref(raw) -> Ref:
    """Return the reference described by ``raw``.

    Non-negative integers and strings made only of ASCII digits become
    :class:`IndexRef`; anything else is treated as an identifier.
    """

    if isinstance(raw, (IndexRef, IdRef)):
        return raw
    if isinstance(raw, bool):
        return IdRef(str(raw))
    if isinstance(raw, int):
        return IndexRef(raw) if raw >= 0 else IdRef(str(raw))
    text = str(raw).strip()
    if text and text.isascii() and text.isdigit():
        return IndexRef(int(text))
    return IdRef(text)


def path_segment(ref: Ref) -> str:
    """Return the URL path segment used to address ``ref``."""

    if isinstance(ref, IndexRef):
        return f"index/{ref.index}"
    return ref.value


def item_id(item: dict) -> str | None:
    """Return the stored identifier of ``item`` if it has one."""

    for key in ("_id", "id"):
        value = item.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def exercise_ref(exercise: dict, index: int) -> Ref:
    """Return the reference used to update ``exercise`` at ``index``.

    The stored identifier wins when present; exercises without one are
    addressed by position.
    """

    stored = item_id(exercise)
    return parse_ref(stored if stored is not None else index)


@dataclass(frozen=True)
class WorkoutAddress:
    """Location of one workout inside a plan document."""

    plan_id: str
    week_number: int
    day_number: int
    workout_ref: Ref
