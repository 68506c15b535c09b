"""
Session registry - at most one live shell session per host.

Path: vshell/ssh/registry.py

The registry is the only state shared between sessions. A host slot is
reserved under the lock before the SSH handshake starts, so a second
connect to the same host fails fast with SessionBusyError instead of
racing the first one.
"""

import logging
import threading
from typing import Dict, List, Optional

from vshell.core.config import ReadConfig, get_config
from vshell.ssh.errors import ConnectError, SessionBusyError
from vshell.ssh.session import InteractiveSession
from vshell.ssh.transport import ParamikoTransport, TransportProvider


logger = logging.getLogger(__name__)

# Placeholder for a host whose handshake is still in progress
_CONNECTING = object()


class SessionRegistry:
    """
    Host -> live session map.

    Usage:
        registry = SessionRegistry()
        session = registry.connect("10.0.0.1:22", "admin", "secret")
        ...
        session.close()   # frees the slot
    """

    def __init__(
        self,
        transport: Optional[TransportProvider] = None,
        read_options: Optional[ReadConfig] = None,
    ):
        """
        Args:
            transport: Opens shells. Defaults to ParamikoTransport.
            read_options: Read settings handed to every session.
        """
        self.transport = transport or ParamikoTransport()
        self.read_options = read_options or get_config().read
        self._lock = threading.Lock()
        self._sessions: Dict[str, object] = {}

    def connect(self, host: str, username: str, password: str) -> InteractiveSession:
        """
        Open a session on host.

        Raises:
            SessionBusyError: host already has a session (or one is connecting).
            ConnectError: the transport failed; the slot is released.
        """
        with self._lock:
            if host in self._sessions:
                raise SessionBusyError(host)
            self._sessions[host] = _CONNECTING

        try:
            channel = self.transport.open_shell(host, username, password)
        except BaseException as e:
            with self._lock:
                self._sessions.pop(host, None)
            if isinstance(e, ValueError) or not isinstance(e, Exception):
                raise
            logger.info(f"{host}: Connect failed: {e}")
            raise ConnectError(host, f"connect failed: {e}", cause=e) from e

        try:
            session = InteractiveSession(host, channel, registry=self, options=self.read_options)
        except BaseException:
            with self._lock:
                self._sessions.pop(host, None)
            try:
                channel.close()
            except Exception as e:
                logger.warning(f"{host}: Error releasing shell (ignored): {e}")
            raise

        with self._lock:
            self._sessions[host] = session

        logger.info(f"{host}: Session registered ({len(self)} active)")
        return session

    def remove(self, host: str):
        """Drop host from the registry. Safe to call repeatedly."""
        with self._lock:
            self._sessions.pop(host, None)
        logger.debug(f"{host}: Session removed from registry")

    def get(self, host: str) -> Optional[InteractiveSession]:
        """Live session for host, or None (also while it is still connecting)."""
        with self._lock:
            session = self._sessions.get(host)
        return session if isinstance(session, InteractiveSession) else None

    def hosts(self) -> List[str]:
        """Hosts with a registered or connecting session."""
        with self._lock:
            return list(self._sessions)

    def close_all(self):
        """Close every live session."""
        with self._lock:
            sessions = [s for s in self._sessions.values() if isinstance(s, InteractiveSession)]
        for session in sessions:
            session.close()

    def __contains__(self, host: str) -> bool:
        with self._lock:
            return host in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Process-wide default registry
_registry: Optional[SessionRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> SessionRegistry:
    """
    Get the process-wide registry, creating it on first use.

    Returns:
        SessionRegistry instance.
    """
    global _registry

    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = SessionRegistry()

    return _registry


def connect(host: str, username: str, password: str) -> InteractiveSession:
    """Open a session on host through the default registry."""
    return get_registry().connect(host, username, password)
