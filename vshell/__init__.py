"""
VelocityShell - interactive SSH shell sessions for automation tooling.

Usage:
    import vshell

    session = vshell.connect("10.0.0.1:22", "admin", "secret")
    try:
        session.write("terminal length 0", "#")
        result = session.write("show version", "#", ">")
        print(result.output)
    finally:
        session.close()
"""

__version__ = "0.1.0"
__author__ = "Scott Peterman"

from vshell.core.config import Config, get_config
from vshell.core.logs import configure_logging
from vshell.ssh.errors import (
    ChannelClosedError,
    CommandTimeoutError,
    ConnectError,
    ReadError,
    RemoteExitError,
    SessionBusyError,
    ShellSessionError,
    TransportError,
    WriteError,
)
from vshell.ssh.models import CommandResult
from vshell.ssh.registry import SessionRegistry, connect, get_registry
from vshell.ssh.session import InteractiveSession
from vshell.ssh.transport import ParamikoTransport, TransportProvider

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "get_config",
    "configure_logging",
    # Sessions
    "connect",
    "get_registry",
    "SessionRegistry",
    "InteractiveSession",
    "CommandResult",
    # Transport
    "TransportProvider",
    "ParamikoTransport",
    # Errors
    "ShellSessionError",
    "SessionBusyError",
    "CommandTimeoutError",
    "TransportError",
    "ConnectError",
    "WriteError",
    "ReadError",
    "ChannelClosedError",
    "RemoteExitError",
]
