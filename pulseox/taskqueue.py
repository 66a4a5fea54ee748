"""Bounded FIFO of deferred tasks carrying an integer payload."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable


class QueueFullError(Exception):
    """Raised when a task is added to a queue that is already full."""


@dataclass(frozen=True)
class Task:
    """A function to call later, with the value to call it with."""

    function: Callable[[int], object]
    data: int

    def __call__(self) -> object:
        return self.function(self.data)


class TaskQueue:
    """A first-in, first-out queue of tasks with a fixed capacity."""

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._tasks: deque[Task] = deque()

    def enqueue(self, function: Callable[[int], object], data: int) -> Task:
        """Append a task; raises QueueFullError when the queue is full."""
        if self.is_full():
            raise QueueFullError(f"task queue is full ({self.capacity} tasks)")
        task = Task(function, data)
        self._tasks.append(task)
        return task

    def dequeue(self) -> Task:
        """Remove and return the oldest task; raises IndexError when empty."""
        if not self._tasks:
            raise IndexError("dequeue from an empty task queue")
        return self._tasks.popleft()

    def is_empty(self) -> bool:
        return not self._tasks

    def is_full(self) -> bool:
        return len(self._tasks) >= self.capacity

    def __len__(self) -> int:
        return len(self._tasks)