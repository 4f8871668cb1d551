import atexit
import copy
import os
import pickle
import threading
import uuid
from datetime import datetime, timezone

from app.config import Config
from app.exceptions import StoreError
from app.utils.constants import Collection
from app.utils.logger import get_logger

log = get_logger(__name__)

# ---- Paths ----
DEFAULT_DATA_PATH = Config.DATA_PATH


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class Store:
    """
    Pickle-backed document store for users, clients, vehicles and bookings.

    Each collection is a dict keyed by record id. Every write is dumped to disk
    straight away (tmp file + os.replace); a failed dump rolls the in-memory
    change back and raises StoreError.
    """

    _inst = None
    _inst_lock = threading.Lock()
    _atexit_registered = False

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path or DEFAULT_DATA_PATH)
        self._data: dict[str, dict[str, dict]] = {name: {} for name in Collection.ALL}
        self._rw = threading.RLock()

        log.info("Using data file %s", self.path)
        self._load()

        # Automatically save on exit (skipped in test environments)
        if not Store._atexit_registered and os.getenv("APP_ENV") != "test":
            atexit.register(self.save)
            Store._atexit_registered = True

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path or DEFAULT_DATA_PATH)
        return cls._inst

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except Exception as e:
            log.warning("Load failed (%s); starting empty.", e)
            self._backup()
            return

        if isinstance(data, dict) and all(isinstance(data.get(n, {}), dict) for n in Collection.ALL):
            for name in Collection.ALL:
                self._data[name] = data.get(name) or {}
            log.info(
                "Loaded: users=%d, clients=%d, vehicles=%d, bookings=%d",
                *(len(self._data[n]) for n in Collection.ALL),
            )
        else:
            log.warning("Incompatible store (%s); starting empty.", type(data).__name__)
            self._backup()

    def _backup(self):
        bak = self.path + ".bak"
        try:
            os.replace(self.path, bak)
            log.warning("Backed up unreadable data file to %s", bak)
        except OSError as e:
            log.error("Backup failed: %s", e)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        tmp = self.path + ".tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp, "wb") as f:
                pickle.dump(self._data, f, protocol=pickle.HIGHEST_PROTOCOL)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except (OSError, pickle.PickleError) as e:
            log.error("Write to %s failed: %s", self.path, e)
            raise StoreError(f"Error: could not persist data ({e})") from e

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            log.debug("Saving to %s", self.path)
            self._dump()

    def _commit(self, collection: str, before: dict):
        """Dump, restoring `collection` to `before` if the write fails."""
        try:
            self._dump()
        except StoreError:
            self._data[collection] = before
            raise

    def _collection(self, name: str) -> dict[str, dict]:
        try:
            return self._data[name]
        except KeyError:
            raise StoreError(f"Error: unknown collection '{name}'") from None

    # ---------- Queries ----------
    def find(self, collection: str, filters=None) -> list[dict]:
        """
        Return copies of the records in `collection` matching `filters`.
        `filters` is a dict of field -> expected value, or a callable predicate.
        """
        with self._rw:
            records = list(self._collection(collection).values())
            if callable(filters):
                out = [r for r in records if filters(r)]
            elif filters:
                out = [r for r in records if all(r.get(k) == v for k, v in filters.items())]
            else:
                out = records
            return copy.deepcopy(out)

    def find_by_id(self, collection: str, record_id) -> dict | None:
        with self._rw:
            rec = self._collection(collection).get(str(record_id))
            return copy.deepcopy(rec) if rec is not None else None

    def count(self, collection: str) -> int:
        with self._rw:
            return len(self._collection(collection))

    # ---------- Commands ----------
    def insert(self, collection: str, record: dict) -> dict:
        """Insert a new record and return a copy including its `id`."""
        with self._rw:
            coll = self._collection(collection)
            rec = copy.deepcopy(dict(record))
            rid = str(rec.get("id") or uuid.uuid4())
            if rid in coll:
                raise StoreError(f"Error: duplicate id '{rid}' in {collection}")
            rec["id"] = rid
            rec.setdefault("createdAt", _now_iso())

            before = dict(coll)
            coll[rid] = rec
            self._commit(collection, before)
            return copy.deepcopy(rec)

    def update_by_id(self, collection: str, record_id, patch: dict) -> dict | None:
        """Shallow-merge `patch` into a record; return the updated copy or None."""
        with self._rw:
            coll = self._collection(collection)
            rid = str(record_id)
            if rid not in coll:
                return None
            before = dict(coll)
            updated = dict(coll[rid])
            updated.update({k: v for k, v in patch.items() if k not in ("id", "createdAt")})
            updated["updatedAt"] = _now_iso()
            coll[rid] = updated
            self._commit(collection, before)
            return copy.deepcopy(updated)

    def delete_by_id(self, collection: str, record_id) -> bool:
        """Delete a record by ID."""
        with self._rw:
            coll = self._collection(collection)
            rid = str(record_id)
            if rid not in coll:
                return False
            before = dict(coll)
            del coll[rid]
            self._commit(collection, before)
            return True

    def clear(self):
        """Drop every record in every collection and persist the empty store."""
        with self._rw:
            for name in Collection.ALL:
                self._data[name] = {}
            self._dump()
