"""
Machine and process discriminators.

Both are computed once per seed and then shared read-only by every
generation in the process.
"""

import os
import secrets
import socket
import threading
import zlib

MACHINE_ID_FILES = ("/etc/machine-id", "/var/lib/dbus/machine-id")

_default_seed = None
_default_lock = threading.Lock()


def read_host_identity():
    """Return a stable host identity string, or None if nothing is available."""
    for path in MACHINE_ID_FILES:
        try:
            with open(path) as file:
                value = file.read().strip()
        except OSError:
            continue
        if value:
            return value
    try:
        return socket.gethostname() or None
    except OSError:
        return None


def fold_pid(pid):
    """Fold an OS pid into 16 bits."""
    return pid % (1 << 16)


class IdentitySeed:
    def __init__(self, host_source=read_host_identity, pid_source=os.getpid):
        self._host_source = host_source
        self._pid_source = pid_source
        self._lock = threading.Lock()
        self._ready = False
        self._machine = None
        self._process = None
        self._random_machine = False

    def _ensure(self):
        if self._ready:
            return
        with self._lock:
            if self._ready:
                return
            host = self._host_source()
            if host:
                digest = zlib.crc32(host.encode("utf-8")) & 0xFFFFFFFF
                self._machine = digest.to_bytes(4, "big")[1:]
            else:
                self._machine = secrets.token_bytes(3)
                self._random_machine = True
            self._process = fold_pid(self._pid_source())
            self._ready = True

    def machine(self):
        """3-byte machine discriminator."""
        self._ensure()
        return self._machine

    def process(self):
        """16-bit process discriminator."""
        self._ensure()
        return self._process

    @property
    def random_machine(self):
        """True when no host identity was found and the machine bytes are random."""
        self._ensure()
        return self._random_machine


def get_identity_seed():
    global _default_seed
    if _default_seed is None:
        with _default_lock:
            if _default_seed is None:
                _default_seed = IdentitySeed()
    return _default_seed
