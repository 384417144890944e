"""XID generation: wall clock + identity seed + counter."""

import threading
import time
from datetime import datetime

from identifier.counter import MonotonicCounter
from identifier.seed import get_identity_seed
from identifier.xid import XID

_default_generator = None
_default_lock = threading.Lock()


class Generator:
    """
    Builds XIDs from an explicit seed and counter.

    The clock is injectable; it must return unix seconds (fractions are
    truncated).
    """

    def __init__(self, seed=None, counter=None, clock=time.time):
        self.seed = seed or get_identity_seed()
        self.counter = counter or MonotonicCounter()
        self._clock = clock

    def generate(self):
        return self.generate_at(self._clock())

    def generate_at(self, when):
        """Generate an XID stamped with the given datetime or unix seconds."""
        if isinstance(when, datetime):
            when = when.timestamp()
        return XID.pack(
            int(when),
            self.seed.machine(),
            self.seed.process(),
            self.counter.next(),
        )


def get_generator():
    global _default_generator
    if _default_generator is None:
        with _default_lock:
            if _default_generator is None:
                _default_generator = Generator()
    return _default_generator


def new_xid():
    """Generate an XID with the process-wide generator."""
    return get_generator().generate()
