"""SSH shell sessions - transport, bounded reads and the session registry."""

from vshell.ssh.errors import (
    ChannelClosedError,
    CommandTimeoutError,
    ConnectError,
    ReadError,
    RemoteExitError,
    SessionBusyError,
    ShellSessionError,
    SSHErrorCategory,
    TransportError,
    WriteError,
    categorize_ssh_error,
)
from vshell.ssh.models import CommandResult
from vshell.ssh.registry import SessionRegistry, connect, get_registry
from vshell.ssh.session import InteractiveSession
from vshell.ssh.transport import ParamikoTransport, ShellChannel, TransportProvider, split_host

__all__ = [
    "SessionRegistry",
    "get_registry",
    "connect",
    "InteractiveSession",
    "CommandResult",
    "TransportProvider",
    "ParamikoTransport",
    "ShellChannel",
    "split_host",
    "ShellSessionError",
    "SessionBusyError",
    "CommandTimeoutError",
    "TransportError",
    "ConnectError",
    "WriteError",
    "ReadError",
    "ChannelClosedError",
    "RemoteExitError",
    "SSHErrorCategory",
    "categorize_ssh_error",
]
