"""Custom errors with tracking IDs."""

import secrets
import time

from utils.timestamp import format_timestamp


def _tracking_id():
    """Time-prefixed XID with random tail; never touches the generator counter or seed."""
    # Imported here: the codec raises these errors, so identifier imports us first.
    from identifier.xid import XID
    stamp = (int(time.time()) & 0xFFFFFFFF).to_bytes(4, "big")
    return str(XID(stamp + secrets.token_bytes(8)))


class BaseXidError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.message = message
        self.error_id = _tracking_id()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"

    def to_dict(self):
        return {
            "error": {
                "id": self.error_id,
                "type": type(self).__name__,
                "message": self.message,
                "timestamp": self.timestamp,
                "context": self.context,
            }
        }


class MalformedInput(BaseXidError):
    """Text or bytes that do not encode a valid XID."""

    def __init__(self, message, value=None, reason=None, **kwargs):
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = value
        if reason:
            context["reason"] = reason
        super().__init__(message, context=context, **kwargs)

    @property
    def reason(self):
        return self.context.get("reason")


class ConfigError(BaseXidError):
    """Invalid configuration values."""

    def __init__(self, message, field=None, **kwargs):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        super().__init__(message, context=context, **kwargs)

