"""Process-wide 24-bit counter for the last three bytes of an XID."""

import secrets
import threading

COUNTER_BITS = 24
COUNTER_MASK = (1 << COUNTER_BITS) - 1


class MonotonicCounter:
    """
    Atomic increment-and-read counter, wrapping modulo 2^24.

    Starts from a random value so that two processes started in the same
    second do not both count from zero.
    """

    def __init__(self, seed=None):
        if seed is None:
            seed = secrets.randbelow(COUNTER_MASK + 1)
        self._value = seed & COUNTER_MASK
        self._issued = 0
        self._lock = threading.Lock()

    def next(self):
        """Increment and return the new value."""
        with self._lock:
            self._value = (self._value + 1) & COUNTER_MASK
            self._issued += 1
            return self._value

    @property
    def current(self):
        with self._lock:
            return self._value

    @property
    def issued(self):
        """Number of values handed out since start."""
        with self._lock:
            return self._issued
