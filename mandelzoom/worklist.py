"""Double-buffered work queue of pixel coordinates."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator


class UpdateList:
    """A FIFO of ``(x, y)`` pairs split into a current and a next generation.

    Points pushed while the current generation is being drained are kept for
    the next one; :meth:`swap` promotes the next generation and discards
    whatever was left of the current one.
    """

    def __init__(self) -> None:
        self._current: deque[tuple[int, int]] = deque()
        self._next: list[tuple[int, int]] = []

    def clear(self) -> None:
        """Drop both generations."""
        self._current.clear()
        self._next.clear()

    def push(self, x: int, y: int) -> None:
        """Queue a point for the next generation."""
        self._next.append((x, y))

    def drain(self) -> Iterator[tuple[int, int]]:
        """Yield and remove the points of the current generation in order."""
        while self._current:
            yield self._current.popleft()

    def swap(self) -> None:
        """Make the next generation current and start an empty next one."""
        self._current = deque(self._next)
        self._next = []

    def __len__(self) -> int:
        return len(self._current)