"""
Crash reporting for the CLI and the server.

Each crash is tagged with a fresh XID and the process identity, printed as a
banner on stderr and appended as one JSON line to the crash log.
"""

import json
import os
import sys
import traceback

from identifier import get_identity_seed, new_xid
from utils.timestamp import format_timestamp

# Overridden by configure() from LoggingConfig.crash_file
_crash_log = "logs/crash.log"


def configure(crash_file):
    """Set crash log file path from config."""
    global _crash_log
    _crash_log = crash_file


def crash_log_path():
    return _crash_log


def build_record(exc_type, exc_value, tb_text, context=None):
    seed = get_identity_seed()
    record = {
        "id": str(new_xid()),
        "timestamp": format_timestamp(),
        "machine": seed.machine().hex(),
        "process": seed.process(),
        "type": exc_type.__name__ if exc_type else "Unknown",
        "msg": str(exc_value) if exc_value is not None else "",
        "traceback": tb_text,
    }
    if context:
        record["context"] = context
    return record


def write_record(record):
    """Append record to the crash log. Never raises."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
    except Exception:
        pass


def log_crash(exc_type, exc_value, exc_tb):
    """sys.excepthook: banner on stderr plus crash log line. Never raises."""
    try:
        tb = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        record = build_record(exc_type, exc_value, tb)
        bar = "=" * 60
        sys.stderr.write(f"\n{bar}\nCRASH [{record['id']}] {record['timestamp']}\n{bar}\n")
        sys.stderr.write(f"{record['type']}: {record['msg']}\n{'-' * 60}\n{tb}{bar}\n\n")
        write_record(record)
    except Exception:
        pass


def create_async_handler(logger=None):
    """Event loop exception handler that records the crash and logs it."""
    def handler(loop, context):
        exc = context.get("exception")
        tb = None
        if exc is not None:
            tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        record = build_record(
            type(exc) if exc else None,
            exc if exc else context.get("message", "Unknown"),
            tb,
            str(context),
        )
        if logger:
            logger.error("Async exception", crash_id=record["id"], error=record["msg"])
        write_record(record)
    return handler


def install_crash_handler():
    """Install global sync exception handler."""
    sys.excepthook = log_crash
