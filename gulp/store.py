"""
ResourceStore — SQLite store for proxy resources

Opened once at a fixed path by init_gulp() (or by whoever embeds gulp)
and then read by the component initializers, each touching its own
partition (table):

    client_certificates   ClientKeyManager
    listen_ports, servers ListenPortManager
    packets               PacketHistory (only when restoring)

Concurrency: component tasks read disjoint partitions at the same time
over one connection. That is a convention the initializer relies on,
not something this class enforces with locks. A new task that writes,
or shares a partition, breaks it.

Also provides PacketHistory, the in-memory packet collection primed
right after the store opens.
"""

import logging
import sqlite3
import threading
from collections import deque
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import StoreError

logger = logging.getLogger(__name__)


# Partition name -> column names (id is implicit)
PARTITIONS: Dict[str, List[str]] = {
    "client_certificates": ["host", "path", "enabled"],
    "listen_ports": ["port", "protocol", "server_id", "enabled"],
    "servers": ["host", "port", "encoder"],
    "packets": ["method", "url", "status", "received_at"],
}

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS client_certificates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        host TEXT NOT NULL,
        path TEXT NOT NULL,
        enabled INTEGER NOT NULL DEFAULT 1
    );

    CREATE TABLE IF NOT EXISTS listen_ports (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        port INTEGER NOT NULL,
        protocol TEXT NOT NULL DEFAULT 'http',
        server_id INTEGER,
        enabled INTEGER NOT NULL DEFAULT 0
    );

    CREATE TABLE IF NOT EXISTS servers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        host TEXT NOT NULL,
        port INTEGER NOT NULL,
        encoder TEXT NOT NULL DEFAULT 'http'
    );

    CREATE TABLE IF NOT EXISTS packets (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        method TEXT NOT NULL,
        url TEXT NOT NULL,
        status INTEGER,
        received_at TEXT DEFAULT ''
    );
"""


class ResourceStore:
    """
    SQLite-backed resource store.

    Created closed; open_at() opens it. Reading or writing a closed
    store raises StoreError.
    """

    def __init__(self):
        self.path: Optional[Path] = None
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open_at(self, path) -> None:
        """
        Open (creating if needed) the store at path.

        Raises:
            StoreError: If the store is already open
        """
        with self._lock:
            if self._conn is not None:
                raise StoreError(f"Store already open at {self.path}")

            self.path = Path(path)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Shared by the component worker threads (reads only)
            conn = sqlite3.connect(str(self.path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.executescript("""
                PRAGMA journal_mode=WAL;
                PRAGMA synchronous=NORMAL;
            """)
            conn.executescript(_SCHEMA)
            conn.commit()
            self._conn = conn

        logger.info("Opened resource store at %s", self.path)

    def read_partition(self, name: str) -> List[Dict[str, Any]]:
        """All rows of a partition, ordered by id."""
        conn = self._require_open()
        self._check_partition(name)
        cursor = conn.execute(f"SELECT * FROM {name} ORDER BY id")
        try:
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def insert(self, partition: str, **values: Any) -> int:
        """
        Insert one row into a partition.

        Returns:
            The new row id
        """
        conn = self._require_open()
        self._check_partition(partition)

        unknown = set(values) - set(PARTITIONS[partition])
        if unknown:
            raise StoreError(f"Unknown columns for {partition}: {', '.join(sorted(unknown))}")

        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._lock:
            cursor = conn.execute(
                f"INSERT INTO {partition} ({columns}) VALUES ({placeholders})",
                tuple(values.values())
            )
            conn.commit()
        return cursor.lastrowid

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _require_open(self) -> sqlite3.Connection:
        conn = self._conn
        if conn is None:
            raise StoreError("Resource store is not open (call open_at() first)")
        return conn

    @staticmethod
    def _check_partition(name: str) -> None:
        if name not in PARTITIONS:
            raise StoreError(f"Unknown partition '{name}'. Valid: {', '.join(PARTITIONS)}")


class PacketHistory:
    """
    In-memory collection of captured packets.

    The headless shell primes it empty (restore=False); restoring
    replays the store's packets partition.
    """

    def __init__(self, store: Optional[ResourceStore] = None, restore: bool = False,
                 capacity: int = 10000):
        self._packets: deque = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self.restored = False

        if restore:
            if store is None:
                raise StoreError("Cannot restore packet history without a store")
            for row in store.read_partition("packets"):
                self._packets.append(row)
            self.restored = True

    def append(self, packet: Dict[str, Any]) -> None:
        with self._lock:
            self._packets.append(packet)

    def recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        with self._lock:
            items = list(self._packets)
        return items[-limit:] if limit > 0 else []

    def __len__(self) -> int:
        with self._lock:
            return len(self._packets)
