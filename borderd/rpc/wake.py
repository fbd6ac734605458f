"""
borderd Wake Channel

Event-notification channel between the RPC side and the stack's
event loop. Writing to the channel makes the loop's select() return
so queued work (a scan trigger, a factory reset) is processed without
waiting for the next tick.

Backed by a non-blocking pipe so the read end can be registered with
a selector.
"""

import os
from typing import Optional

from ..errors import WakeError


# Pending notifications are coalesced; one byte per notify is enough
WAKE_BYTE = b"\x01"

# Bytes drained per read
DRAIN_CHUNK = 512


class WakeChannel:
    """
    Pipe-backed wake-up channel.

    Usage:
        wake = WakeChannel()

        # Event loop side
        selector.register(wake, selectors.EVENT_READ)
        ...
        wake.drain()

        # Notifier side
        wake.notify()
    """

    def __init__(self):
        """
        Create the channel.

        Raises:
            OSError: If the pipe cannot be created
        """
        self._read_fd: Optional[int]
        self._write_fd: Optional[int]
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self._notifications = 0

    def fileno(self) -> int:
        """Read end, for select()/selectors."""
        if self._read_fd is None:
            raise ValueError("wake channel closed")
        return self._read_fd

    def notify(self) -> None:
        """
        Wake the event loop.

        A full pipe already guarantees a wake-up, so it is not an error.

        Raises:
            WakeError: If the channel is closed or the write fails
        """
        if self._write_fd is None:
            raise WakeError("wake channel closed")
        try:
            written = os.write(self._write_fd, WAKE_BYTE)
        except BlockingIOError:
            written = len(WAKE_BYTE)
        except OSError as e:
            raise WakeError(f"wake notify failed: {e}") from e
        if written != len(WAKE_BYTE):
            raise WakeError("short write on wake channel")
        self._notifications += 1

    def drain(self) -> int:
        """
        Consume pending notifications.

        Returns:
            Number of bytes drained
        """
        if self._read_fd is None:
            return 0
        total = 0
        while True:
            try:
                chunk = os.read(self._read_fd, DRAIN_CHUNK)
            except BlockingIOError:
                break
            if not chunk:
                break
            total += len(chunk)
        return total

    @property
    def notifications(self) -> int:
        """Total successful notify() calls."""
        return self._notifications

    @property
    def closed(self) -> bool:
        return self._write_fd is None

    def close(self) -> None:
        """Close both ends of the pipe."""
        for fd in (self._read_fd, self._write_fd):
            if fd is not None:
                os.close(fd)
        self._read_fd = None
        self._write_fd = None
