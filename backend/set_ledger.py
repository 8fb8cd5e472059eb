"""Per-exercise log of completed sets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class SetRecord:
    """One completed set.  Records are never modified after creation."""

    set_number: int
    reps: int
    weight: float | None
    timestamp: str

    def to_dict(self) -> dict:
        """Return the form stored in the plan document."""

        return {
            "set": self.set_number,
            "setNumber": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict, position: int) -> "SetRecord":
        """Build a record from a previously saved set.

        ``position`` is the 1-based place of ``data`` in its list and is used
        when the stored set carries no number of its own.
        """

        number = data.get("setNumber", data.get("set"))
        try:
            number = int(number)
        except (TypeError, ValueError):
            number = position
        return cls(
            set_number=number,
            reps=parse_reps(data.get("reps")) or 0,
            weight=parse_weight(data.get("weight")),
            timestamp=str(data.get("timestamp") or ""),
        )


def parse_reps(value) -> int | None:
    """Return ``value`` as a positive rep count or ``None`` if it is not one.

    Accepts ints and strings of digits.  Empty input, zero, negative numbers,
    booleans and fractional numbers are rejected.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        reps = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        reps = int(value)
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            return None
        reps = int(text)
    return reps if reps > 0 else None


def parse_weight(value) -> float | None:
    """Return ``value`` as a weight, treating blanks, zero and junk as ``None``."""

    if value is None or isinstance(value, bool):
        return None
    try:
        weight = float(str(value).strip())
    except ValueError:
        return None
    if weight != weight or weight == 0:  # NaN or zero
        return None
    return weight


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class SetLedger:
    """Append-only store of :class:`SetRecord` objects per exercise index."""

    def __init__(self, count: int) -> None:
        self.count = max(0, int(count))
        self._sets: dict[int, tuple[SetRecord, ...]] = {
            idx: () for idx in range(self.count)
        }

    def seed(self, exercise_index: int, records: list[dict] | None) -> None:
        """Load sets saved in an earlier session for ``exercise_index``."""

        self._sets[exercise_index] = tuple(
            SetRecord.from_dict(data, pos)
            for pos, data in enumerate(records or [], 1)
            if isinstance(data, dict)
        )

    def record_set(
        self,
        exercise_index: int,
        reps,
        weight=None,
        *,
        now: str | None = None,
    ) -> SetRecord | None:
        """Append a set for ``exercise_index``.

        Returns the new record, or ``None`` when ``reps`` is not a positive
        whole number or the index is out of range.  Nothing is stored in that
        case.
        """

        if exercise_index not in self._sets:
            logging.debug("Ignoring set for unknown exercise %r", exercise_index)
            return None
        count = parse_reps(reps)
        if count is None:
            logging.debug("Ignoring set with invalid reps %r", reps)
            return None
        existing = self._sets[exercise_index]
        record = SetRecord(
            set_number=len(existing) + 1,
            reps=count,
            weight=parse_weight(weight),
            timestamp=now or _now_iso(),
        )
        self._sets[exercise_index] = existing + (record,)
        return record

    def sets_for(self, exercise_index: int) -> tuple[SetRecord, ...]:
        return self._sets.get(exercise_index, ())

    def total_sets(self) -> int:
        return sum(len(records) for records in self._sets.values())
