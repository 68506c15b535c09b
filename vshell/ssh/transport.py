#!/usr/bin/env python3
"""
SSH transport - password authentication, interactive shell channel.

Opens a paramiko connection, starts a remote shell and hands back a
ShellChannel with separate input/output streams. Key exchange, ciphers and
host-key trust all live here; sessions only see byte streams.
"""
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

import paramiko

from vshell.core.config import TransportConfig, get_config


logger = logging.getLogger(__name__)

DEFAULT_SSH_PORT = 22

_legacy_lock = threading.Lock()


def split_host(host: str) -> Tuple[str, int]:
    """
    Split a registry host key into address and port.

    Accepts 'address:port', '[v6addr]:port', a bare v6 address or a bare
    hostname (port 22).
    """
    if not host:
        raise ValueError("Host is required")

    if host.startswith("["):
        address, sep, rest = host[1:].partition("]")
        if not sep:
            raise ValueError(f"Invalid host: {host!r}")
        port = rest[1:] if rest.startswith(":") else ""
        return address, int(port) if port else DEFAULT_SSH_PORT

    # More than one colon without brackets is a bare IPv6 address
    if host.count(":") != 1:
        return host, DEFAULT_SSH_PORT

    address, _, port = host.partition(":")
    if not port.isdigit():
        raise ValueError(f"Invalid port in host: {host!r}")
    return address, int(port)


def enable_legacy_algorithms():
    """Prefer legacy kex, ciphers and key types for old network devices.

    paramiko reads these preference lists from the Transport class, so this
    affects every connection opened afterwards.
    """
    with _legacy_lock:
        legacy_kex = (
            "diffie-hellman-group1-sha1",
            "diffie-hellman-group14-sha1",
            "diffie-hellman-group-exchange-sha1",
        )
        legacy_ciphers = (
            "aes128-cbc",
            "aes256-cbc",
            "3des-cbc",
            "aes192-cbc",
        )
        legacy_keys = ("ssh-rsa", "ssh-dss")

        transport = paramiko.Transport
        transport._preferred_kex = _prefer(legacy_kex, transport._preferred_kex, transport._kex_info)
        transport._preferred_ciphers = _prefer(legacy_ciphers, transport._preferred_ciphers,
                                               transport._cipher_info)
        transport._preferred_keys = _prefer(legacy_keys, transport._preferred_keys,
                                            getattr(transport, "_key_info", {}))


def _prefer(legacy, current, supported):
    """Legacy names paramiko still implements, then the current list."""
    head = tuple(name for name in legacy if name in supported)
    return head + tuple(name for name in current if name not in head)


class ChannelInput:
    """Write side of a shell channel."""

    def __init__(self, channel: paramiko.Channel):
        self._channel = channel

    def write(self, data: bytes) -> int:
        self._channel.sendall(data)
        return len(data)

    def close(self):
        self._channel.shutdown_write()


class ChannelOutput:
    """Read side of a shell channel. read() returns b'' at end of stream."""

    def __init__(self, channel: paramiko.Channel):
        self._channel = channel

    def read(self, size: int) -> bytes:
        return self._channel.recv(size)


class ShellChannel:
    """An open remote shell: input/output streams plus wait/close lifecycle."""

    def __init__(self, client: paramiko.SSHClient, channel: paramiko.Channel):
        self._client = client
        self._channel = channel
        self.stdin = ChannelInput(channel)
        self.stdout = ChannelOutput(channel)

    def wait(self) -> int:
        """Block until the remote shell exits and return its exit status."""
        return self._channel.recv_exit_status()

    def close(self):
        """Close the channel, then the client. Raises whatever paramiko raises."""
        try:
            self._channel.close()
        finally:
            self._client.close()


class TransportProvider(ABC):
    """Opens authenticated shells. Subclass to swap out the SSH stack."""

    @abstractmethod
    def open_shell(self, host: str, username: str, password: str,
                   timeout: Optional[float] = None):
        """
        Connect to host and start an interactive shell.

        Args:
            host: 'address:port' key.
            username: Login user.
            password: Login password.
            timeout: Connect timeout in seconds; None uses the provider default.

        Returns:
            A ShellChannel-like object with stdin, stdout, wait() and close().
        """


class ParamikoTransport(TransportProvider):
    """
    paramiko-backed transport.

    Host keys are not verified unless verify_host_keys is set, in which case
    system known_hosts (plus known_hosts_file) is loaded and unknown hosts
    are rejected.
    """

    def __init__(self, options: Optional[TransportConfig] = None):
        self.options = options or get_config().transport

        if self.options.legacy_mode:
            enable_legacy_algorithms()

    def _host_key_policy(self, client: paramiko.SSHClient):
        if not self.options.verify_host_keys:
            return paramiko.AutoAddPolicy()

        client.load_system_host_keys()
        if self.options.known_hosts_file:
            client.load_host_keys(str(Path(self.options.known_hosts_file).expanduser()))
        return paramiko.RejectPolicy()

    def open_shell(self, host: str, username: str, password: str,
                   timeout: Optional[float] = None) -> ShellChannel:
        if not username:
            raise ValueError("Username is required")

        address, port = split_host(host)
        if timeout is None:
            timeout = self.options.connect_timeout

        logger.info(f"Connecting to {address}:{port} as {username}")

        client = paramiko.SSHClient()
        try:
            client.set_missing_host_key_policy(self._host_key_policy(client))
            client.connect(
                hostname=address,
                port=port,
                username=username,
                password=password,
                timeout=timeout,
                auth_timeout=self.options.auth_timeout,
                allow_agent=False,
                look_for_keys=False,
            )

            if self.options.request_pty:
                channel = client.invoke_shell(
                    term=self.options.term,
                    width=self.options.width,
                    height=self.options.height,
                )
            else:
                channel = client.get_transport().open_session()
                channel.invoke_shell()

            # Chunk readers block on recv; the session deadline bounds them
            channel.settimeout(None)
        except BaseException:
            client.close()
            raise

        logger.info(f"Shell opened on {address}:{port}")
        return ShellChannel(client, channel)
