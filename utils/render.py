"""Human-readable rendering of XID fields."""

from utils.timestamp import format_seconds

_LABEL_WIDTH = 13


def _line(label, value):
    return f"{label + ':':<{_LABEL_WIDTH}}{value}\n"


def describe(xid, include_id=False):
    """
    One field per line, e.g.

        Timestamp:   2020-09-13T12:26:40Z
        Machine ID:  010203
        Process ID:  2571
        Counter:     1
    """
    lines = []
    if include_id:
        lines.append(_line("XID", str(xid)))
    lines.append(_line("Timestamp", format_seconds(xid.timestamp)))
    lines.append(_line("Machine ID", xid.machine.hex()))
    lines.append(_line("Process ID", xid.pid))
    lines.append(_line("Counter", xid.counter))
    return "".join(lines)
