"""
Counters for engine primitive accounting.
"""

import threading


class OpCounter:
    """
    Tracks how many times each engine primitive was evaluated.

    Safe to share between the state-level and gate-level worker threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_operation: dict[str, int] = {}

    def increment(self, operation: str, amount: int = 1) -> None:
        """Record `amount` evaluations of `operation`."""
        with self._lock:
            self._by_operation[operation] = self._by_operation.get(operation, 0) + amount

    def reset(self) -> None:
        """Reset all counters to zero."""
        with self._lock:
            self._by_operation.clear()

    @property
    def total(self) -> int:
        """Total primitive evaluations."""
        with self._lock:
            return sum(self._by_operation.values())

    @property
    def by_operation(self) -> dict[str, int]:
        """Get evaluations broken down by primitive name."""
        with self._lock:
            return dict(self._by_operation)

    def __repr__(self) -> str:
        return f"OpCounter(total={self.total})"
