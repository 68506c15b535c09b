"""
Interactive shell session - write commands, read until a marker or deadline.

Path: vshell/ssh/session.py

A session owns one remote shell. Every write is followed by a bounded read:
output accumulates chunk by chunk until one of the caller's markers appears
anywhere in the accumulated text, or the read deadline passes.
"""

import codecs
import logging
import threading
import time
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional, Tuple

from vshell.core.config import ReadConfig, get_config
from vshell.ssh.errors import (
    ChannelClosedError,
    CommandTimeoutError,
    ReadError,
    RemoteExitError,
    WriteError,
)
from vshell.ssh.models import CommandResult
from vshell.ssh.reader import ChunkReader


# Module logger - configure at application level
logger = logging.getLogger(__name__)


class InteractiveSession:
    """
    One live shell on one host.

    Sessions are created by SessionRegistry.connect(); closing a session
    frees its registry slot.

    Usage:
        session = registry.connect("10.0.0.1:22", "admin", "secret")
        try:
            result = session.write("show version", "#", ">")
            print(result.output)
        finally:
            session.close()
    """

    def __init__(self, host: str, channel, registry=None,
                 options: Optional[ReadConfig] = None):
        """
        Args:
            host: Registry key for this session.
            channel: Open ShellChannel from the transport.
            registry: Registry to remove this session from on close.
            options: Read settings (deadline, buffer size, encoding).
        """
        self._host = host
        self._channel = channel
        self._stdin = channel.stdin
        self._stdout = channel.stdout
        self._registry = registry
        self.options = options or get_config().read

        self._decoder = codecs.getincrementaldecoder(self.options.encoding)(errors="replace")
        self._op_lock = threading.Lock()
        self._close_lock = threading.Lock()
        self._closed = False
        # Reader left running by a timed-out read; whatever it delivers is stale
        self._stale: Optional[ChunkReader] = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"InteractiveSession(host={self._host!r}, {state})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def send(self, text: str):
        """Write text plus one newline without reading any output."""
        with self._op_lock:
            self._write_raw(text + "\n")

    def write(self, text: str, *markers: str) -> CommandResult:
        """Write text plus one newline, then read until a marker matches."""
        return self._command(text + "\n", markers)

    def writeln(self, text: str, *markers: str) -> CommandResult:
        """Write text plus two newlines, then read until a marker matches.

        For prompts that need a blank line to submit.
        """
        return self._command(text + "\n\n", markers)

    def read_until(self, *markers: str) -> CommandResult:
        """Read until a marker matches without writing anything first."""
        with self._op_lock:
            return self._read_until(markers, self._take_stale())

    def wait(self):
        """
        Block until the remote shell exits.

        Raises:
            RemoteExitError: The shell exited with a non-zero status.
        """
        status = self._channel.wait()
        logger.debug(f"{self._host}: Remote shell exited with status {status}")
        if status != 0:
            raise RemoteExitError(self._host, status)

    def close(self):
        """Release the shell and free the registry slot. Never raises."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        logger.info(f"{self._host}: Closing session")
        try:
            self._channel.close()
        except Exception as e:
            logger.warning(f"{self._host}: Error releasing shell (ignored): {e}")

        if self._registry is not None:
            self._registry.remove(self._host)

    def _write_raw(self, data: str):
        logger.debug(f"{self._host}: Sending {data!r}")
        try:
            self._stdin.write(data.encode(self.options.encoding))
        except Exception as e:
            raise WriteError(self._host, f"write failed: {e}", cause=e) from e

    def _command(self, data: str, markers: Tuple[str, ...]) -> CommandResult:
        with self._op_lock:
            stale = self._take_stale()
            try:
                self._write_raw(data)
            except WriteError:
                self._stale = stale
                raise
            return self._read_until(markers, stale)

    def _spawn_reader(self) -> ChunkReader:
        return ChunkReader(self._stdout, self.options.buffer_size, name=self._host)

    def _take_stale(self) -> Optional[ChunkReader]:
        """
        Deal with a reader left over from a timed-out read.

        Must run before the next command is written. Output already delivered
        belongs to the earlier command and is dropped here; a reader still in
        flight is returned so the next read waits on it (only one reader may
        touch the stream) and drops whatever it delivers.
        """
        reader = self._stale
        self._stale = None
        if reader is None:
            return None

        if reader.done():
            chunk = reader.result()
            if chunk.error is None and not chunk.eof:
                self._drop_stale(chunk)
                return None
        return reader

    def _drop_stale(self, chunk):
        logger.debug(f"{self._host}: Discarding {len(chunk.data)} bytes of stale output")
        self._decoder.reset()

    def _read_until(self, markers: Tuple[str, ...],
                    stale: Optional[ChunkReader] = None) -> CommandResult:
        """
        Bounded read.

        One deadline is armed for the whole read. Each delivered chunk is
        appended to the accumulator and every marker is checked, in order,
        against the full accumulated text; the first marker found wins.

        Args:
            markers: Stop strings, highest priority first.
            stale: Reader started before this command; its data is dropped.
        """
        timeout = self.options.timeout
        deadline = time.monotonic() + timeout
        output = ""

        reader = stale or self._spawn_reader()

        while True:
            remaining = max(deadline - time.monotonic(), 0)
            try:
                chunk = reader.result(timeout=remaining)
            except FutureTimeoutError:
                self._stale = reader
                result = CommandResult(-1, output, markers)
                logger.warning(f"{self._host}: No marker matched after {timeout:g}s")
                raise CommandTimeoutError(self._host, timeout, result) from None

            if chunk.error is not None:
                output += self._decoder.decode(b"", final=True)
                result = CommandResult(-1, output, markers)
                raise ReadError(self._host, f"read failed: {chunk.error}",
                                cause=chunk.error, result=result) from chunk.error

            if chunk.eof:
                output += self._decoder.decode(b"", final=True)
                logger.debug(f"{self._host}: Output stream closed")
                raise ChannelClosedError(self._host, result=CommandResult(-1, output, markers))

            if reader is stale:
                self._drop_stale(chunk)
                reader = self._spawn_reader()
                continue

            output += self._decoder.decode(chunk.data)
            logger.debug(f"{self._host}: Received {len(chunk.data)} bytes")

            for index, marker in enumerate(markers):
                if marker in output:
                    logger.debug(f"{self._host}: Matched marker {index}: {marker!r}")
                    return CommandResult(index, output, markers)

            reader = self._spawn_reader()
