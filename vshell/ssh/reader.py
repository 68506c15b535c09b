"""
Chunk reader - single-use background read of the shell output stream.

Path: vshell/ssh/reader.py

Each ChunkReader performs exactly one read call on a daemon thread and
delivers the result through its own Future. Read failures are delivered as
a tagged Chunk rather than dropped, so the waiting session can tell a dead
stream apart from a slow one.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Optional

from vshell.ssh.models import Chunk


logger = logging.getLogger(__name__)


class ChunkReader:
    """
    One read, one delivery, then the thread exits.

    Usage:
        reader = ChunkReader(channel.stdout, 65536, name="10.0.0.1:22")
        chunk = reader.result(timeout=5.0)   # raises TimeoutError if nothing yet
    """

    def __init__(self, stream, buffer_size: int, name: str = ""):
        self._stream = stream
        self._buffer_size = buffer_size
        self._future: Future = Future()
        self._thread = threading.Thread(
            target=self._run,
            name=f"vshell-reader-{name}" if name else "vshell-reader",
            daemon=True,
        )
        self._thread.start()

    def _run(self):
        try:
            data = self._stream.read(self._buffer_size)
        except Exception as e:
            logger.debug(f"Chunk read failed: {e}")
            self._future.set_result(Chunk(error=e))
            return
        self._future.set_result(Chunk(data=data or b""))

    def done(self) -> bool:
        """True once the read has delivered."""
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> Chunk:
        """
        Wait for the delivery.

        Args:
            timeout: Seconds to wait; None blocks until the read completes.

        Returns:
            The delivered Chunk.

        Raises:
            concurrent.futures.TimeoutError: Nothing delivered in time.
        """
        return self._future.result(timeout=timeout)
