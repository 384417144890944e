from internal.logging import LogLevel, StructuredLogger, get_logger
from utils.timestamp import format_seconds, format_timestamp, now_micros
from core.errors import BaseXidError, ConfigError, MalformedInput

__all__ = [
    "LogLevel",
    "StructuredLogger",
    "get_logger",
    "format_seconds",
    "format_timestamp",
    "now_micros",
    "BaseXidError",
    "ConfigError",
    "MalformedInput",
]
