"""Thread-safe JSON-RPC request id allocation."""

import threading

from rpcwire.errors import create_error

from .messages import Request


class IDAllocator:
    """Monotonic request id counter owned by one client.

    All reads and writes of the counter happen under a single lock, so one
    allocator can serve concurrent callers without handing out duplicates.
    With auto-increment disabled the same id is returned until ``set_next_id``
    moves it.
    """

    def __init__(self, start: int = 0, auto_increment: bool = True):
        """Initialize allocator.

        Args:
            start: First id to hand out
            auto_increment: Advance the counter after each allocation
        """
        self._lock = threading.Lock()
        self._next_id = self._check_id(start)
        self._auto_increment = auto_increment

    @staticmethod
    def _check_id(value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise create_error(
                "INVALID_ARGUMENT",
                detail=f"Request id must be a non-negative integer, got {value!r}",
            )
        return value

    @property
    def auto_increment(self) -> bool:
        """Whether allocations advance the counter."""
        with self._lock:
            return self._auto_increment

    def set_auto_increment(self, flag: bool) -> None:
        """Enable or disable auto-increment for future allocations."""
        with self._lock:
            self._auto_increment = flag

    def peek(self) -> int:
        """Return the id the next allocation will use, without allocating."""
        with self._lock:
            return self._next_id

    def next_id(self) -> int:
        """Allocate an id.

        Returns:
            The current counter value
        """
        with self._lock:
            current = self._next_id
            if self._auto_increment:
                self._next_id += 1
            return current

    def set_next_id(self, value: int) -> None:
        """Set the id handed out by the next allocation.

        Raises:
            InvalidArgument: If value is not a non-negative integer
        """
        value = self._check_id(value)
        with self._lock:
            self._next_id = value

    def restamp(self, request: Request) -> Request:
        """Give an already built request a freshly allocated id."""
        request.id = self.next_id()
        return request
