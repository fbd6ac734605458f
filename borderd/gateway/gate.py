"""
borderd Synchronization Gate

A single mutual-exclusion lock shared between the RPC-serving thread
and the network stack's worker thread. Every touch of the stack API
happens inside the gate.

The gate is deliberately coarse: no read/write distinction and no
reentrancy. Acquiring it twice from the same thread deadlocks.
"""

import threading
from typing import Optional


class SyncGate:
    """
    Non-reentrant lock around the network stack.

    Usage:
        gate = SyncGate()

        with gate:
            stack.set_channel(15)

    Release is guaranteed on every exit path of the with block,
    including exceptions raised by the stack.
    """

    def __init__(self, name: str = "stack-gate"):
        self.name = name
        self._lock = threading.Lock()
        self._owner: Optional[str] = None

    def acquire(self, timeout: float = -1) -> bool:
        """
        Acquire the gate.

        Args:
            timeout: Seconds to wait (-1 = forever)

        Returns:
            True if acquired
        """
        acquired = self._lock.acquire(timeout=timeout)
        if acquired:
            self._owner = threading.current_thread().name
        return acquired

    def release(self) -> None:
        """Release the gate."""
        self._owner = None
        self._lock.release()

    def locked(self) -> bool:
        """Whether some thread currently holds the gate."""
        return self._lock.locked()

    @property
    def owner(self) -> Optional[str]:
        """Name of the thread holding the gate, if any."""
        return self._owner

    def __enter__(self) -> "SyncGate":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = f"held by {self._owner}" if self.locked() else "free"
        return f"<SyncGate {self.name} {state}>"
