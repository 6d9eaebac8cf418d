# healthmate_sleep/config/config_manager.py
import os
from typing import Any, Optional

import yaml

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'config.yaml')
CONFIG_ENV_VAR = 'HEALTHMATE_SLEEP_CONFIG'


class ConfigManager:
    """Central configuration manager"""

    def __init__(self, config_path: Optional[str] = None, overrides: Optional[dict] = None):
        self.config_path = config_path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        self.config = self._load_config()
        for key, value in (overrides or {}).items():
            self.set(key, value)

    def _load_config(self) -> dict:
        """Load configuration from file"""
        with open(self.config_path, 'r') as file:
            return yaml.safe_load(file) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        # Support nested keys with dot notation
        keys = key.split('.')
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation"""
        keys = key.split('.')
        target = self.config
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value
