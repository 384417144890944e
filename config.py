import json
import os
from enum import Enum
from pathlib import Path

from core.errors import ConfigError

_DEFAULT_CONFIG = Path(__file__).parent / "xid.json"
CONFIG_ENV = "XID_CONFIG"


class OutputFormat(Enum):
    HEX = "hex"
    BINARY = "binary"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            names = ", ".join(member.value for member in cls)
            raise ConfigError(f"Invalid output format: {value} [{names}]", field="generator.format") from None


class GeneratorConfig:
    __slots__ = ("count", "format", "separator", "max_batch")

    def __init__(self, count=1, format=OutputFormat.HEX, separator="\n", max_batch=1000):
        if not isinstance(count, int) or count < 1:
            raise ConfigError(f"count must be a positive integer, got {count!r}", field="generator.count")
        if not isinstance(max_batch, int) or max_batch < 1:
            raise ConfigError(f"max_batch must be a positive integer, got {max_batch!r}", field="generator.max_batch")
        if not isinstance(separator, str):
            raise ConfigError(f"separator must be a string, got {separator!r}", field="generator.separator")
        self.count = count
        self.format = OutputFormat.parse(format)
        self.separator = separator
        self.max_batch = max_batch


class ServerConfig:
    __slots__ = ("host", "port")

    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level", "crash_file")

    def __init__(self, level="INFO", crash_file="logs/crash.log"):
        self.level = level
        self.crash_file = crash_file


class Config:
    __slots__ = ("generator", "server", "logging")

    def __init__(self, generator=None, server=None, logging=None):
        self.generator = generator or GeneratorConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        if not isinstance(d, dict):
            raise ConfigError(f"Config must be a JSON object, got {type(d).__name__}")
        try:
            return cls(
                GeneratorConfig(**d.get("generator", {})),
                ServerConfig(**d.get("server", {})),
                LoggingConfig(**d.get("logging", {})),
            )
        except (TypeError, AttributeError) as exc:
            raise ConfigError(f"Invalid config: {exc}", cause=exc) from exc


def load_config(path=None):
    """Load config from path, $XID_CONFIG, or xid.json beside this module."""
    if path is None:
        path = os.environ.get(CONFIG_ENV)
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    try:
        with open(config_path, encoding="utf-8") as file:
            data = json.load(file)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Config file {config_path} is not valid JSON", cause=exc) from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}", cause=exc) from exc
    return Config.from_dict(data)
