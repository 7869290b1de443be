"""Central service provider passed to every module. Config, modules, services, hooks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from src.core.base_module import BaseModule

logger = logging.getLogger(__name__)


class Core:
    """Passed to every module's setup(). Provides shared infrastructure. Modules interact only through Core."""

    def __init__(self, config_manager: Any) -> None:
        self._config = config_manager
        self._modules: dict[str, "BaseModule"] = {}
        self._hooks: dict[str, list[Callable[..., None]]] = {}

    def get_config(self, module_key: str) -> dict:
        """Get a module's namespaced config section."""
        return self._config.get_config(module_key)

    def save_config(self, module_key: str, data: dict) -> None:
        """Save a module's config section. Merges into root and persists."""
        self._config.save_config(module_key, data)

    def is_module_loaded(self, key: str) -> bool:
        return key in self._modules

    def register_module(self, key: str, module: "BaseModule") -> None:
        """Called by ModuleManager when a module is loaded. Not for use by modules."""
        self._modules[key] = module

    def get_service(self, module_key: str, service_name: str) -> Any:
        """Read a service value from another module. Returns None if module not loaded or service missing."""
        mod = self._modules.get(module_key)
        if mod is None:
            return None
        try:
            return mod.get_service_value(service_name)
        except Exception as e:
            logger.debug("get_service %s.%s failed: %s", module_key, service_name, e)
            return None

    def subscribe(self, hook: str, callback: Callable[..., None]) -> None:
        """Subscribe to a hook. Hook names are namespaced: '{module_key}.{hook_name}'."""
        self._hooks.setdefault(hook, []).append(callback)

    def emit(self, hook: str, **kwargs: Any) -> None:
        """Emit a hook. Callbacks are invoked; exceptions in one callback are logged and do not stop others."""
        for cb in self._hooks.get(hook, []):
            try:
                cb(**kwargs)
            except Exception as e:
                logger.exception("Hook %s subscriber failed: %s", hook, e)
