from src.core.base_module import BaseModule
from src.core.config_manager import ConfigManager
from src.core.config_migration import REMINDER_KEY, migrate_config
from src.core.core import Core
from src.core.module_manager import ModuleManager

__all__ = ["BaseModule", "ConfigManager", "Core", "ModuleManager", "REMINDER_KEY", "migrate_config"]
