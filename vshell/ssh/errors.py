"""
Shell session errors.

Path: vshell/ssh/errors.py

Exception hierarchy for the session registry and bounded reads, plus
categorisation of raw transport exceptions for diagnostics.
"""

import socket
from enum import Enum
from typing import Optional

from vshell.ssh.models import CommandResult


class SSHErrorCategory(Enum):
    """Categorized SSH error types for better diagnostics."""
    CONNECTION_REFUSED = "connection_refused"
    CONNECTION_TIMEOUT = "connection_timeout"
    DNS_FAILURE = "dns_failure"
    AUTH_FAILURE = "auth_failure"
    KEY_EXCHANGE_FAILURE = "key_exchange"
    HOST_KEY_REJECTED = "host_key_rejected"
    CHANNEL_ERROR = "channel_error"
    PROTOCOL_ERROR = "protocol_error"
    SOCKET_ERROR = "socket_error"
    UNKNOWN = "unknown"


def categorize_ssh_error(exception: BaseException) -> SSHErrorCategory:
    """
    Categorize an SSH exception for better error reporting.

    Args:
        exception: The caught exception.

    Returns:
        SSHErrorCategory indicating the type of failure.
    """
    error_msg = str(exception).lower()
    error_type = type(exception).__name__.lower()

    if "connection refused" in error_msg or "errno 111" in error_msg:
        return SSHErrorCategory.CONNECTION_REFUSED

    if "timed out" in error_msg or "timeout" in error_type:
        return SSHErrorCategory.CONNECTION_TIMEOUT

    if "name or service not known" in error_msg or "getaddrinfo" in error_msg \
            or isinstance(exception, socket.gaierror):
        return SSHErrorCategory.DNS_FAILURE

    if "not found in known_hosts" in error_msg or "badhostkey" in error_type:
        return SSHErrorCategory.HOST_KEY_REJECTED

    if "authentication" in error_type or any(
            x in error_msg for x in ["auth", "permission denied", "no supported authentication"]):
        return SSHErrorCategory.AUTH_FAILURE

    if any(x in error_msg for x in ["key exchange", "kex", "incompatible", "no matching"]):
        return SSHErrorCategory.KEY_EXCHANGE_FAILURE

    if "channel" in error_msg or "eof" in error_msg or "closed" in error_msg:
        return SSHErrorCategory.CHANNEL_ERROR

    if isinstance(exception, (socket.error, OSError)) or "socket" in error_msg:
        return SSHErrorCategory.SOCKET_ERROR

    if "ssh" in error_type or "paramiko" in type(exception).__module__:
        return SSHErrorCategory.PROTOCOL_ERROR

    return SSHErrorCategory.UNKNOWN


class ShellSessionError(Exception):
    """Base class for all session errors."""


class SessionBusyError(ShellSessionError):
    """The host already has a live session in the registry."""

    def __init__(self, host: str):
        super().__init__(f"{host}: host is busy, close the existing session first")
        self.host = host


class CommandTimeoutError(ShellSessionError):
    """No marker matched before the read deadline."""

    def __init__(self, host: str, timeout: float, result: CommandResult):
        super().__init__(
            f"{host}: timeout after {timeout:g}s waiting for output "
            f"({len(result.output)} chars received)"
        )
        self.host = host
        self.timeout = timeout
        self.result = result


class TransportError(ShellSessionError):
    """Connect, write or read failed at the transport layer.

    The original exception is chained as ``__cause__`` by the raiser.
    """

    def __init__(self, host: str, message: str, cause: Optional[BaseException] = None,
                 result: Optional[CommandResult] = None):
        super().__init__(f"{host}: {message}")
        self.host = host
        self.category = categorize_ssh_error(cause) if cause is not None else SSHErrorCategory.UNKNOWN
        self.result = result


class ConnectError(TransportError):
    """The transport could not open a shell on the host."""


class WriteError(TransportError):
    """Writing to the shell input stream failed."""


class ReadError(TransportError):
    """Reading the shell output stream failed mid-command."""


class ChannelClosedError(TransportError):
    """The shell output stream reached end of file."""

    def __init__(self, host: str, result: Optional[CommandResult] = None):
        super().__init__(host, "channel closed", result=result)
        self.category = SSHErrorCategory.CHANNEL_ERROR


class RemoteExitError(ShellSessionError):
    """The remote shell exited with a non-zero status."""

    def __init__(self, host: str, exit_status: int):
        super().__init__(f"{host}: remote shell exited with status {exit_status}")
        self.host = host
        self.exit_status = exit_status
