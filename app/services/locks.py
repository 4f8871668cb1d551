import threading
from contextlib import contextmanager


def client_key(client_id) -> str:
    """Lock key for a client; vehicle locks are keyed by the bare vehicle id."""
    return f"client:{client_id}"


class KeyedLocks:
    """
    One mutex per key (vehicle id, or client_key() for clients). Holding a
    vehicle's lock serializes the availability check and the booking write for
    that vehicle, so two overlapping requests cannot both pass the check.
    Deletes of vehicles and clients take the same locks as booking writes.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, key) -> threading.Lock:
        key = str(key)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, *keys):
        """Acquire the locks for all distinct keys, in sorted order."""
        ordered = sorted({str(k) for k in keys if k is not None})
        acquired = []
        try:
            for k in ordered:
                lock = self.get(k)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
