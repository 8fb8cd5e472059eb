from __future__ import annotations

import logging


class ExerciseCursor:
    """Index of the exercise currently being performed.

    The index always stays within ``[0, count)`` when there is at least one
    exercise.  ``next`` and ``previous`` stop at the ends instead of
    wrapping.  ``on_move`` is called after every successful move so the
    owner can reset per-exercise state.
    """

    def __init__(self, count: int, on_move=None) -> None:
        self.count = max(0, int(count))
        self.index = 0
        self._on_move = on_move

    def next(self) -> bool:
        if self.index < self.count - 1:
            return self._move(self.index + 1)
        return False

    def previous(self) -> bool:
        if self.index > 0:
            return self._move(self.index - 1)
        return False

    def jump_to(self, index) -> bool:
        """Move directly to ``index``.

        Out-of-range and non-integer indices are ignored and ``False`` is
        returned; the cursor is left untouched.
        """

        if isinstance(index, bool) or not isinstance(index, int):
            logging.debug("Ignoring jump to non-integer exercise index %r", index)
            return False
        if not 0 <= index < self.count:
            logging.debug(
                "Ignoring jump to exercise %s of %s", index, self.count
            )
            return False
        return self._move(index)

    def is_first(self) -> bool:
        return self.index == 0

    def is_last(self) -> bool:
        return self.index >= self.count - 1

    def _move(self, index: int) -> bool:
        self.index = index
        if self._on_move:
            self._on_move(index)
        return True
