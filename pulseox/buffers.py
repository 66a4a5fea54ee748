"""Fixed-size FIFO byte buffer used by the serial port."""

from __future__ import annotations

from collections import deque


class CircularBuffer:
    """A bounded FIFO of byte values.

    Pushing into a full buffer drops the new value; the contents already
    stored are never overwritten.
    """

    def __init__(self, size: int = 30) -> None:
        if size < 1:
            raise ValueError(f"buffer size must be at least 1, got {size}")
        self._size = size
        self._items: deque[int] = deque()

    @property
    def size(self) -> int:
        """Capacity of the buffer."""
        return self._size

    def push(self, value: int) -> None:
        """Store a byte; it is silently dropped when the buffer is full."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        if len(self._items) < self._size:
            self._items.append(value)

    def pop(self) -> int:
        """Remove and return the oldest byte.

        Raises IndexError when the buffer is empty.
        """
        if not self._items:
            raise IndexError("pop from an empty buffer")
        return self._items.popleft()

    def has_room(self) -> bool:
        """True while another byte can be stored."""
        return len(self._items) < self._size

    def __len__(self) -> int:
        return len(self._items)