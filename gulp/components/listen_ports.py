"""
ListenPortManager — Local ports the proxy listens on

Store-dependent: load() reads the listen_ports and servers partitions.
Ports loaded from the store start inactive; SettingsIO.set_options()
activates the enabled ones after component initialization.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from ..store import ResourceStore

logger = logging.getLogger(__name__)

PROTOCOLS = ("http", "https", "tcp", "udp")


@dataclass(frozen=True)
class Server:
    """Upstream a listen port forwards to."""
    id: int
    host: str
    port: int
    encoder: str = "http"


@dataclass(frozen=True)
class ListenPort:
    port: int
    protocol: str = "http"
    server: Optional[Server] = None
    enabled: bool = False


class ListenPortManager:
    """
    Listen port table.

    Keyed by port number. Only enabled entries count as active.
    """

    def __init__(self, store: ResourceStore):
        self._store = store
        self._ports: Dict[int, ListenPort] = {}
        self._servers: Dict[int, Server] = {}
        self._lock = threading.Lock()
        self.loaded = False

    def load(self) -> int:
        """
        Read ports and their servers from the store.

        Returns:
            Number of ports loaded

        Raises:
            StoreError: If the store is not open
        """
        servers = {
            row["id"]: Server(
                id=row["id"], host=row["host"], port=row["port"], encoder=row["encoder"]
            )
            for row in self._store.read_partition("servers")
        }

        ports = {}
        for row in self._store.read_partition("listen_ports"):
            ports[row["port"]] = ListenPort(
                port=row["port"],
                protocol=row["protocol"],
                server=servers.get(row["server_id"]),
                enabled=False,
            )

        with self._lock:
            self._servers = servers
            self._ports = ports
            self.loaded = True

        logger.info("Loaded %d listen port(s), %d server(s)", len(ports), len(servers))
        return len(ports)

    def apply(self, entry: Dict[str, Any]) -> ListenPort:
        """
        Add or replace a port from a settings entry.

        Entry keys: port (required), protocol, enabled, server
        ({host, port, encoder}).

        Raises:
            ValueError: If the entry is malformed
        """
        if not isinstance(entry, dict):
            raise ValueError(f"Listen port entry must be an object, got {type(entry).__name__}")

        port = entry.get("port")
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            raise ValueError(f"Invalid listen port: {port!r}")

        protocol = str(entry.get("protocol", "http")).lower()
        if protocol not in PROTOCOLS:
            raise ValueError(f"Unknown protocol '{protocol}'. Valid: {', '.join(PROTOCOLS)}")

        server = None
        server_entry = entry.get("server")
        if server_entry is not None:
            if not isinstance(server_entry, dict) or "host" not in server_entry:
                raise ValueError(f"Invalid server for port {port}")
            server = Server(
                id=0,
                host=str(server_entry["host"]),
                port=int(server_entry.get("port", port)),
                encoder=str(server_entry.get("encoder", "http")),
            )

        listen_port = ListenPort(
            port=port,
            protocol=protocol,
            server=server,
            enabled=bool(entry.get("enabled", False)),
        )

        with self._lock:
            existing = self._ports.get(port)
            if server is None and existing is not None:
                listen_port = replace(listen_port, server=existing.server)
            self._ports[port] = listen_port

        state = "active" if listen_port.enabled else "inactive"
        logger.info("Listen port %d/%s %s", port, protocol, state)
        return listen_port

    def get(self, port: int) -> Optional[ListenPort]:
        with self._lock:
            return self._ports.get(port)

    def ports(self) -> List[ListenPort]:
        with self._lock:
            return [self._ports[p] for p in sorted(self._ports)]

    def active_ports(self) -> List[ListenPort]:
        return [p for p in self.ports() if p.enabled]
