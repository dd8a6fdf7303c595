"""Plugin discovery and management."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

from loguru import logger

from retrodeck.plugins.base import EmulatorPlugin


class PluginManager:
    """Discovers and manages emulator plugins.

    The registry is fixed once discovery has run; the watcher only reads it.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, EmulatorPlugin] = {}

    def discover(self) -> None:
        """Auto-discover all plugins in the ``retrodeck.plugins`` package.

        Scans sub-packages for classes that inherit from ``EmulatorPlugin``
        and registers them.
        """
        plugins_dir = Path(__file__).parent
        for finder, module_name, is_pkg in pkgutil.iter_modules([str(plugins_dir)]):
            if module_name in ("base", "plugin_manager", "__init__"):
                continue
            if not is_pkg:
                continue
            full_module = f"retrodeck.plugins.{module_name}.plugin"
            try:
                mod = importlib.import_module(full_module)
                for attr_name in dir(mod):
                    attr = getattr(mod, attr_name)
                    if (
                        isinstance(attr, type)
                        and issubclass(attr, EmulatorPlugin)
                        and attr is not EmulatorPlugin
                        and attr.__module__ == mod.__name__
                    ):
                        instance = attr()
                        self.register(instance)
                        logger.info(
                            "Discovered plugin: {} ({})", instance.name, full_module
                        )
            except Exception as e:
                logger.warning("Failed to load plugin {}: {}", full_module, e)

    def register(self, plugin: EmulatorPlugin) -> None:
        """Manually register a plugin instance."""
        self._plugins[plugin.name] = plugin

    def get_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return list(self._plugins.keys())

    def find_for_process(self, process_name: str) -> EmulatorPlugin | None:
        """Plugin whose executable matches *process_name* (exact or prefix)."""
        for plugin in self._plugins.values():
            if plugin.matches_process(process_name):
                return plugin
        return None
