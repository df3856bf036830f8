"""
Components — Collaborators brought online by init_components()

Two read disjoint partitions of the open store:
- ClientKeyManager: client_certificates
- ListenPortManager: listen_ports, servers

Two scan packages and never touch the store:
- EncoderRegistry: gulp.codecs
- VulCheckerRegistry: gulp.checks

SettingsIO applies the settings document once they are all loaded.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..store import ResourceStore
from .client_keys import ClientCertificate, ClientKeyManager
from .encoders import EncoderRegistry
from .listen_ports import ListenPort, ListenPortManager, Server
from .settings import SettingsIO
from .vulcheckers import VulCheckerRegistry


@dataclass
class Components:
    """The four component instances sharing one store."""
    store: ResourceStore
    client_keys: ClientKeyManager
    listen_ports: ListenPortManager
    encoders: EncoderRegistry = field(default_factory=EncoderRegistry)
    vulcheckers: VulCheckerRegistry = field(default_factory=VulCheckerRegistry)

    @classmethod
    def create(cls, store: Optional[ResourceStore] = None) -> 'Components':
        store = store if store is not None else ResourceStore()
        return cls(
            store=store,
            client_keys=ClientKeyManager(store),
            listen_ports=ListenPortManager(store),
        )


__all__ = [
    'Components',
    'ClientCertificate', 'ClientKeyManager',
    'ListenPort', 'ListenPortManager', 'Server',
    'EncoderRegistry', 'VulCheckerRegistry',
    'SettingsIO',
]
