"""
Configuration management for VelocityShell.

Handles loading config from ~/.vshell/config.yaml and providing
default values for transport, read and logging settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


# Default paths
DEFAULT_BASE_DIR = Path.home() / ".vshell"
DEFAULT_CONFIG_FILE = DEFAULT_BASE_DIR / "config.yaml"

# Session defaults
DEFAULT_CONNECT_TIMEOUT = 15
DEFAULT_READ_TIMEOUT = 20.0
DEFAULT_BUFFER_SIZE = 64 * 1024


@dataclass
class TransportConfig:
    """SSH transport settings."""

    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    auth_timeout: float = 10
    verify_host_keys: bool = False
    known_hosts_file: Optional[Path] = None
    legacy_mode: bool = False
    request_pty: bool = True
    term: str = "vt100"
    width: int = 200
    height: int = 48


@dataclass
class ReadConfig:
    """Bounded read settings."""

    timeout: float = DEFAULT_READ_TIMEOUT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: str = "utf-8"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: Optional[Path] = None


@dataclass
class Config:
    """Main configuration container."""

    config_file: Path = DEFAULT_CONFIG_FILE

    transport: TransportConfig = field(default_factory=TransportConfig)
    read: ReadConfig = field(default_factory=ReadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file. If None, uses default location.
                         Can also be set via VSHELL_CONFIG env var.

        Returns:
            Config instance with values from file merged with defaults.
        """
        if config_path is None:
            config_path = Path(
                os.environ.get("VSHELL_CONFIG", str(DEFAULT_CONFIG_FILE))
            )
        config_path = Path(config_path)

        config = cls()
        config.config_file = config_path

        # If config file doesn't exist, return defaults
        if not config_path.exists():
            return config

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config YAML: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config YAML: expected a mapping in {config_path}")

        # Transport settings
        if "transport" in data:
            t_data = data["transport"] or {}
            known_hosts = t_data.get("known_hosts_file")
            config.transport = TransportConfig(
                connect_timeout=t_data.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT),
                auth_timeout=t_data.get("auth_timeout", 10),
                verify_host_keys=bool(t_data.get("verify_host_keys", False)),
                known_hosts_file=Path(known_hosts).expanduser() if known_hosts else None,
                legacy_mode=bool(t_data.get("legacy_mode", False)),
                request_pty=bool(t_data.get("request_pty", True)),
                term=t_data.get("term", "vt100"),
                width=t_data.get("width", 200),
                height=t_data.get("height", 48),
            )

        # Read settings
        if "read" in data:
            r_data = data["read"] or {}
            config.read = ReadConfig(
                timeout=float(r_data.get("timeout", DEFAULT_READ_TIMEOUT)),
                buffer_size=int(r_data.get("buffer_size", DEFAULT_BUFFER_SIZE)),
                encoding=r_data.get("encoding", "utf-8"),
            )

        # Logging settings
        if "logging" in data:
            log_data = data["logging"] or {}
            log_file = log_data.get("file")
            config.logging = LoggingConfig(
                level=log_data.get("level", "INFO"),
                file=Path(log_file).expanduser() if log_file else None,
            )

        return config

    def save_default_config(self):
        """Save a default config file if one doesn't exist."""
        if self.config_file.exists():
            return

        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        default_config = f"""\
# VelocityShell Configuration

# =============================================================================
# SSH Transport
# =============================================================================

transport:
  connect_timeout: {self.transport.connect_timeout}   # Seconds to establish TCP + SSH
  auth_timeout: {self.transport.auth_timeout}
  verify_host_keys: {str(self.transport.verify_host_keys).lower()}   # false = accept any host key
  # known_hosts_file: ~/.ssh/known_hosts   # Used when verify_host_keys is true
  legacy_mode: {str(self.transport.legacy_mode).lower()}         # Prefer old kex/ciphers for legacy gear
  request_pty: {str(self.transport.request_pty).lower()}
  term: {self.transport.term}
  width: {self.transport.width}              # PTY columns
  height: {self.transport.height}              # PTY rows

# =============================================================================
# Bounded Reads
# =============================================================================

read:
  timeout: {self.read.timeout}         # Seconds before a write/writeln gives up
  buffer_size: {self.read.buffer_size}   # Max bytes per chunk read
  encoding: {self.read.encoding}

# =============================================================================
# Logging
# =============================================================================

logging:
  level: {self.logging.level}              # DEBUG, INFO, WARNING, ERROR
  # file: ~/.vshell/vshell.log     # Log to a file instead of stderr
"""

        with open(self.config_file, "w") as f:
            f.write(default_config)


# Singleton instance
_config: Optional[Config] = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload from file.

    Returns:
        Config instance.
    """
    global _config

    if _config is None or reload:
        _config = Config.load()

    return _config
