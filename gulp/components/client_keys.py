"""
ClientKeyManager — Client certificates presented per upstream host

Store-dependent: load() reads the client_certificates partition and
nothing else.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict

from ..store import ResourceStore

logger = logging.getLogger(__name__)

PARTITION = "client_certificates"


@dataclass(frozen=True)
class ClientCertificate:
    """A certificate file to present when connecting to host."""
    id: int
    host: str
    path: str
    enabled: bool = True


class ClientKeyManager:
    """In-memory view of the client_certificates partition."""

    def __init__(self, store: ResourceStore):
        self._store = store
        self._by_host: Dict[str, ClientCertificate] = {}
        self._lock = threading.Lock()
        self.loaded = False

    def load(self) -> int:
        """
        Read enabled certificates from the store.

        Returns:
            Number of enabled certificates loaded

        Raises:
            StoreError: If the store is not open
        """
        rows = self._store.read_partition(PARTITION)
        by_host = {}
        for row in rows:
            cert = ClientCertificate(
                id=row["id"],
                host=row["host"].lower(),
                path=row["path"],
                enabled=bool(row["enabled"]),
            )
            if cert.enabled:
                by_host[cert.host] = cert

        with self._lock:
            self._by_host = by_host
            self.loaded = True

        logger.info("Loaded %d client certificate(s)", len(by_host))
        return len(by_host)
