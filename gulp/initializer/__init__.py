"""
AppInitializer — Phased startup for gulp

Three entry points, each callable exactly once, in this order:

    init = AppInitializer(headless=True, settings_path="settings.json")
    init.init_core()        # logging; failure exits the process
    init.init_gulp()        # headless only: open store, prime packet history
    init.init_components()  # four component tasks in parallel, then settings

Calling an entry point twice, or before its prerequisites, raises
PhaseError. init_components() surfaces the first component failure
with its original type, and turns an interrupted join into
InitializationAborted.

State lives on the instance (PhaseTracker); build one per process and
pass it to whoever needs the components.

Configuration via environment variables:
    GULP_INIT_WORKERS=4     # Threads for init_components()
    GULP_STORE_PATH=...     # Store opened by init_gulp()
    GULP_LOG_LEVEL=INFO     # Level set by init_core()
"""

import logging
import sys
import traceback
from pathlib import Path
from typing import Dict, List, Optional

from ..components import Components, SettingsIO
from ..config import Config, get_config
from ..errors import InitializationAborted, PhaseError
from ..exclusion import ExclusionRuleManager
from ..logs import RecentLogHandler, init_logging
from ..store import PacketHistory
from .config import InitializerConfig
from .phases import Phase, PhaseState, PhaseTracker
from .pools import ComponentPool
from .task import ComponentTask, TaskKind, TaskResult, TaskStatus, independent_task, store_task

logger = logging.getLogger(__name__)


class AppInitializer:
    """
    Brings gulp's collaborators online.

    Owns:
    - Phase state (one-shot, monotonic)
    - Components (store, managers, registries)
    - The exclusion rule manager the settings document feeds
    """

    def __init__(
        self,
        headless: bool = False,
        settings_path: Optional[str] = None,
        config: Optional[Config] = None,
        components: Optional[Components] = None,
        exclusions: Optional[ExclusionRuleManager] = None,
        tasks: Optional[List[ComponentTask]] = None,
        initializer_config: Optional[InitializerConfig] = None
    ):
        """
        Args:
            headless: True when running the command shell without a GUI
            settings_path: JSON settings applied after init_components()
            config: Application config. If None, loaded by init_core().
            components: Component instances (default: fresh set, closed store)
            exclusions: Rule manager settings are applied to
            tasks: Override the four component tasks (tests, embedding)
            initializer_config: Pool sizing. If None, loads from environment.
        """
        self.headless = headless
        self.settings_path = settings_path
        self.config = config
        self.components = components if components is not None else Components.create()
        self.exclusions = exclusions if exclusions is not None else ExclusionRuleManager()
        self._tasks = tasks
        self._init_config = initializer_config

        self._phases = PhaseTracker(headless=headless)

        self.recent_logs: Optional[RecentLogHandler] = None
        self.packets: Optional[PacketHistory] = None
        self.results: Dict[str, TaskResult] = {}

    @property
    def phases(self) -> PhaseTracker:
        return self._phases

    # =========================================================================
    # Phases
    # =========================================================================

    def init_core(self) -> None:
        """
        Initialize logging.

        Logging is not available yet if this fails, so the failure goes
        to stderr and the process exits with status 1.

        Raises:
            PhaseError: If called twice
        """
        self._phases.begin(Phase.CORE)

        try:
            if self.config is None:
                self.config = get_config()
            self.recent_logs = init_logging(self.headless, self.config.logging)
        except Exception as e:
            self._phases.fail(Phase.CORE)
            sys.stderr.write(f"[FATAL ERROR] Failed to initialize logging: {e}\n")
            traceback.print_exc(file=sys.stderr)
            sys.stderr.flush()
            sys.exit(1)

        self._phases.complete(Phase.CORE)
        logger.info("Core initialized (headless=%s)", self.headless)

    def init_gulp(self) -> None:
        """
        Open the resource store and prime the packet history.

        Headless mode only. Sequential: the history is created after
        the store is open, and never restored from it.

        Raises:
            PhaseError: If called twice, outside headless mode, or before init_core()
            StoreError: If the store is already open
            OSError, sqlite3.Error: If the store cannot be opened
        """
        self._phases.begin(Phase.GULP)

        try:
            store = self.components.store
            store.open_at(self.config.store.store_path)
            self.packets = PacketHistory(store, restore=False)
        except BaseException:
            self._phases.fail(Phase.GULP)
            raise

        self._phases.complete(Phase.GULP)

    def init_components(self) -> None:
        """
        Run the four component tasks concurrently and join them.

        Then applies the settings file, if one was given. Settings
        failures are logged, never raised.

        Raises:
            PhaseError: If called twice, before its prerequisites, or
                without an open store
            InitializationAborted: If the join is interrupted
            Exception: The first component failure, with its own type
        """
        self._phases.check(Phase.COMPONENTS)
        if not self.components.store.is_open:
            raise PhaseError("init_components() requires an open resource store")

        self._phases.begin(Phase.COMPONENTS)

        pool = ComponentPool(self._init_config)
        try:
            self.results = pool.run_all(self.component_tasks())
        except KeyboardInterrupt as e:
            self._phases.fail(Phase.COMPONENTS)
            raise InitializationAborted("Component initialization interrupted") from e
        except BaseException:
            self._phases.fail(Phase.COMPONENTS)
            raise
        finally:
            logger.debug("Component pool: %s", pool.stats().to_dict())
            pool.shutdown(wait=False)

        self._phases.complete(Phase.COMPONENTS)
        logger.info("Components initialized: %s", ", ".join(sorted(self.results)))

        if self.settings_path:
            self._load_settings(self.settings_path)

    # =========================================================================
    # Helpers
    # =========================================================================

    def component_tasks(self) -> List[ComponentTask]:
        """The tasks init_components() runs."""
        if self._tasks is not None:
            return list(self._tasks)

        c = self.components
        return [
            store_task(c.client_keys.load, name="client-keys"),
            store_task(c.listen_ports.load, name="listen-ports"),
            independent_task(c.encoders.scan, name="encoders"),
            independent_task(c.vulcheckers.scan, name="vulcheckers"),
        ]

    def _load_settings(self, path: str) -> None:
        """Apply the settings file. Errors are logged and swallowed."""
        try:
            text = Path(path).expanduser().read_bytes()
            SettingsIO(self.components.listen_ports, self.exclusions).set_options(text)
        except Exception:
            logger.exception("Failed to apply settings from %s", path)

    def is_ready(self, phase: Phase) -> bool:
        return self._phases.is_ready(phase)


__all__ = [
    'AppInitializer',
    'Phase', 'PhaseState', 'PhaseTracker',
    'ComponentTask', 'TaskKind', 'TaskResult', 'TaskStatus',
    'independent_task', 'store_task',
    'ComponentPool', 'InitializerConfig',
]
