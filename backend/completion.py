from __future__ import annotations


class CompletionTracker:
    """Set of completed exercise indices and the progress derived from it."""

    def __init__(self, count: int, completed=()) -> None:
        self.count = max(0, int(count))
        self._completed: set[int] = {
            idx for idx in completed if 0 <= idx < self.count
        }

    @property
    def completed_indices(self) -> frozenset[int]:
        return frozenset(self._completed)

    @property
    def completed_count(self) -> int:
        return len(self._completed)

    def complete(self, index: int) -> bool:
        """Mark ``index`` completed.

        Returns ``True`` only when the exercise was not already completed.
        Indices outside the workout are ignored.
        """

        if not 0 <= index < self.count or index in self._completed:
            return False
        self._completed.add(index)
        return True

    def is_completed(self, index: int) -> bool:
        return index in self._completed

    def progress_percentage(self) -> int:
        """Whole-number share of completed exercises, rounded half up."""

        if self.count == 0:
            return 0
        return (200 * len(self._completed) + self.count) // (2 * self.count)

    def is_workout_complete(self) -> bool:
        return len(self._completed) == self.count
