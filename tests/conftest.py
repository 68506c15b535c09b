"""
Shared fixtures: an in-memory shell transport and isolated configuration.
"""

import queue
import threading

import pytest

import vshell.core.config as config_module
import vshell.ssh.registry as registry_module
from vshell.core.config import ReadConfig
from vshell.ssh.registry import SessionRegistry
from vshell.ssh.transport import TransportProvider


class FakeOutput:
    """Output stream fed from a queue. Items are bytes, b'' (EOF) or an exception."""

    def __init__(self):
        self._queue = queue.Queue()
        self._leftover = b""
        self.reads = 0

    def feed(self, data):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._queue.put(data)

    def fail(self, exc):
        self._queue.put(exc)

    def read(self, size):
        self.reads += 1
        if self._leftover:
            data = self._leftover
        else:
            data = self._queue.get()
            if isinstance(data, BaseException):
                raise data
        self._leftover = data[size:]
        return data[:size]


class FakeInput:
    """Input stream recording writes; optional responder produces shell output."""

    def __init__(self, output: FakeOutput):
        self._output = output
        self.written = []
        self.error = None
        self.responder = None

    @property
    def text(self):
        return b"".join(self.written).decode("utf-8")

    def write(self, data):
        if self.error is not None:
            raise self.error
        self.written.append(data)
        if self.responder is not None:
            for chunk in self.responder(data.decode("utf-8")):
                self._output.feed(chunk)
        return len(data)


class FakeChannel:
    """ShellChannel stand-in."""

    def __init__(self, host):
        self.host = host
        self.stdout = FakeOutput()
        self.stdin = FakeInput(self.stdout)
        self.exit_status = 0
        self.exited = threading.Event()
        self.close_error = None
        self.close_calls = 0

    def wait(self):
        self.exited.wait()
        return self.exit_status

    def close(self):
        self.close_calls += 1
        # Unblock any reader still waiting on the stream
        self.stdout.feed(b"")
        self.exited.set()
        if self.close_error is not None:
            raise self.close_error


class FakeTransport(TransportProvider):
    """Opens FakeChannels. Set ``gate`` to hold handshakes, ``error`` to fail them."""

    def __init__(self):
        self.channels = []
        self.calls = []
        self.gate = None
        self.error = None
        self.responder = None
        self._lock = threading.Lock()

    def open_shell(self, host, username, password, timeout=None):
        with self._lock:
            self.calls.append((host, username, password))
        if self.gate is not None:
            self.gate.wait(5)
        if self.error is not None:
            raise self.error
        channel = FakeChannel(host)
        channel.stdin.responder = self.responder
        with self._lock:
            self.channels.append(channel)
        return channel


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config at an empty temp location and reset cached singletons."""
    monkeypatch.setenv("VSHELL_CONFIG", str(tmp_path / "config.yaml"))
    monkeypatch.setattr(config_module, "_config", None)
    monkeypatch.setattr(registry_module, "_registry", None)


@pytest.fixture
def read_options():
    return ReadConfig(timeout=0.3, buffer_size=64 * 1024)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def registry(transport, read_options):
    reg = SessionRegistry(transport=transport, read_options=read_options)
    yield reg
    reg.close_all()


@pytest.fixture
def prompt_responder():
    """Factory: echo each command back followed by a prompt, like a network device."""
    def make(prompt="router#"):
        def respond(data):
            return [data.replace("\n", "\r\n") + prompt]
        return respond
    return make
