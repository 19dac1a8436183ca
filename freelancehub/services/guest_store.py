"""
Guest-mode persistence.

Guest sessions keep their clients and projects in a key-value store instead
of the database.  The store holds two fixed keys, one per record type, each
mapping to a JSON-encoded array.  Stores are plain objects injected wherever
a guest operation runs; :class:`GuestSessionRegistry` ties one store to each
guest session and drops it when the session ends.
"""
import json
import logging
import secrets
import string
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from freelancehub.utils import utcnow_iso

logger = logging.getLogger(__name__)

GUEST_CLIENTS_KEY = "freelancehub_guest_clients"
GUEST_PROJECTS_KEY = "freelancehub_guest_projects"

_ID_ALPHABET = string.ascii_lowercase + string.digits
# Fields a caller may never overwrite through update()
_PROTECTED_FIELDS = ("id", "created_at")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dictionary-backed key-value store; lives as long as its session."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


def generate_guest_id(prefix: str) -> str:
    """``<prefix>_<epoch millis>_<9 base36 chars>``, unique within a session."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


class GuestCollection:
    """All records of one type for one guest, stored under a single key."""

    def __init__(self, backend: KeyValueStore, key: str, id_prefix: str):
        self.backend = backend
        self.key = key
        self.id_prefix = id_prefix

    def get_all(self) -> List[Dict[str, Any]]:
        data = self.backend.get(self.key)
        return json.loads(data) if data else []

    def save(self, records: List[Dict[str, Any]]) -> None:
        self.backend.set(self.key, json.dumps(records))

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self.get_all():
            if record.get("id") == record_id:
                return record
        return None

    def add(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        records = self.get_all()
        now = utcnow_iso()
        record = {
            **fields,
            "id": generate_guest_id(self.id_prefix),
            "created_at": now,
            "updated_at": now,
        }
        records.append(record)
        self.save(records)
        return record

    def update(self, record_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        records = self.get_all()
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                changes = {k: v for k, v in updates.items() if k not in _PROTECTED_FIELDS}
                records[index] = {**record, **changes, "updated_at": utcnow_iso()}
                self.save(records)
                return records[index]
        return None

    def delete(self, record_id: str) -> bool:
        records = self.get_all()
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self.save(remaining)
        return True

    def clear(self) -> None:
        self.backend.delete(self.key)


class GuestStore:
    """The clients and projects of a single guest session."""

    def __init__(self, backend: Optional[KeyValueStore] = None):
        self.backend = backend if backend is not None else MemoryKeyValueStore()
        self.clients = GuestCollection(self.backend, GUEST_CLIENTS_KEY, "guest_client")
        self.projects = GuestCollection(self.backend, GUEST_PROJECTS_KEY, "guest_project")

    def clear_all(self) -> None:
        self.clients.clear()
        self.projects.clear()


class GuestSessionRegistry:
    """
    Owns one :class:`GuestStore` per guest session.

    Sessions are identified by an opaque random token handed to the browser
    in a cookie.  Ending a session discards its store and every record in it.
    A session unused for ``idle_timeout`` seconds expires, and once
    ``max_sessions`` are open the least recently used one makes room for a
    new session.
    """

    def __init__(
        self,
        backend_factory: Callable[[], KeyValueStore] = MemoryKeyValueStore,
        idle_timeout: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.backend_factory = backend_factory
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self.clock = clock
        # session id -> (store, last access); least recently used first
        self._stores: "OrderedDict[str, Tuple[GuestStore, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def _expired(self, last_access: float, now: float) -> bool:
        return self.idle_timeout is not None and now - last_access > self.idle_timeout

    def _evict(self, now: float) -> List[GuestStore]:
        """Drop idle sessions, then the oldest ones over the cap. Caller holds the lock."""
        evicted = []
        for session_id, (store, last_access) in list(self._stores.items()):
            if not self._expired(last_access, now):
                break
            del self._stores[session_id]
            evicted.append(store)
        if self.max_sessions is not None:
            while self._stores and len(self._stores) >= self.max_sessions:
                _, (store, _) = self._stores.popitem(last=False)
                evicted.append(store)
        return evicted

    def start_session(self) -> str:
        session_id = secrets.token_urlsafe(24)
        now = self.clock()
        with self._lock:
            evicted = self._evict(now)
            self._stores[session_id] = (GuestStore(self.backend_factory()), now)
        for store in evicted:
            store.clear_all()
        if evicted:
            logger.info("Evicted %d guest sessions", len(evicted))
        logger.info("Started guest session %s", session_id[:8])
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[GuestStore]:
        if not session_id:
            return None
        now = self.clock()
        with self._lock:
            entry = self._stores.get(session_id)
            if entry is None:
                return None
            store, last_access = entry
            if self._expired(last_access, now):
                del self._stores[session_id]
                expired = True
            else:
                self._stores[session_id] = (store, now)
                self._stores.move_to_end(session_id)
                expired = False
        if expired:
            store.clear_all()
            logger.info("Guest session %s expired", session_id[:8])
            return None
        return store

    def end_session(self, session_id: str) -> bool:
        with self._lock:
            entry = self._stores.pop(session_id, None)
        if entry is None:
            return False
        entry[0].clear_all()
        logger.info("Ended guest session %s", session_id[:8])
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)
