"""
Plugin discovery — Scan a package for concrete subclasses

Shared by EncoderRegistry (gulp.codecs) and VulCheckerRegistry
(gulp.checks). Every module of the package is imported; classes
defined in it that subclass the base and are not abstract are
instantiated once, keyed by their `name` attribute.

Import is the slow part (it is why encoders are loaded at startup
instead of on the first request), so registries scan once and cache.
"""

import importlib
import inspect
import logging
import pkgutil
import threading
from typing import Dict, Generic, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def discover(package_name: str, base: Type[T]) -> Dict[str, T]:
    """
    Import every module in a package and instantiate plugin classes.

    Args:
        package_name: Dotted package to scan (e.g. "gulp.codecs")
        base: Plugin base class

    Returns:
        Dict mapping plugin name -> instance

    Raises:
        ImportError: If the package or one of its modules fails to import
        ValueError: If two plugins share a name
    """
    package = importlib.import_module(package_name)
    found: Dict[str, T] = {}

    for module_info in pkgutil.iter_modules(package.__path__):
        module_name = f"{package_name}.{module_info.name}"
        module = importlib.import_module(module_name)

        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ != module_name:
                continue
            if not issubclass(cls, base) or inspect.isabstract(cls):
                continue

            plugin = cls()
            name = getattr(plugin, "name", "") or cls.__name__.lower()
            if name in found:
                raise ValueError(f"Duplicate plugin name '{name}' in {package_name}")
            found[name] = plugin

    logger.debug("Discovered %d plugin(s) in %s", len(found), package_name)
    return found


class PluginRegistry(Generic[T]):
    """
    Lazily scanned, cached plugin lookup.

    scan() is called eagerly by the initializer; lookups scan on first
    use if nobody did.
    """

    package: str = ""
    base: type = object

    def __init__(self, package: Optional[str] = None):
        if package:
            self.package = package
        self._plugins: Optional[Dict[str, T]] = None
        self._lock = threading.Lock()

    @property
    def scanned(self) -> bool:
        return self._plugins is not None

    def scan(self) -> Dict[str, T]:
        """Scan the package once. Later calls return the cached result."""
        if self._plugins is not None:
            return self._plugins

        with self._lock:
            if self._plugins is None:
                self._plugins = discover(self.package, self.base)
        return self._plugins

    def get(self, name: str) -> Optional[T]:
        return self.scan().get(name.lower())

    def names(self) -> List[str]:
        return sorted(self.scan())

    def all(self) -> List[T]:
        plugins = self.scan()
        return [plugins[name] for name in sorted(plugins)]
