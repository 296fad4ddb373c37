import logging
from typing import Dict, Mapping, Optional

from config import Settings, settings as default_settings
from settings_store import SettingsStore

logger = logging.getLogger(__name__)

# Keys in the persisted settings store.
SETTINGS_BA_USERNAME = "ba_username"
SETTINGS_BA_PASSWORD = "ba_password"

# Environment variables overriding the corresponding settings key.
ENV_USERNAME = "CHIP_API_BA_USERNAME"
ENV_PASSWORD = "CHIP_API_BA_PASSWORD"

_ENV_MAP: Dict[str, str] = {
    SETTINGS_BA_USERNAME: ENV_USERNAME,
    SETTINGS_BA_PASSWORD: ENV_PASSWORD,
}


class CredentialProvider:
    """Resolves the HTTP Basic credentials from the environment or the settings store."""

    def __init__(self, config: Optional[Settings] = None, store: Optional[SettingsStore] = None):
        self.config = config or default_settings
        self.store = store or SettingsStore(self.config.SETTINGS_FILE)

    @staticmethod
    def available_settings_keys() -> Dict[str, str]:
        return {
            "SETTINGS_BA_USERNAME": SETTINGS_BA_USERNAME,
            "SETTINGS_BA_PASSWORD": SETTINGS_BA_PASSWORD,
        }

    @staticmethod
    def get_env_variable(settings_key: str) -> Optional[str]:
        return _ENV_MAP.get(settings_key)

    def _env_value(self, settings_key: str) -> Optional[str]:
        env_var = self.get_env_variable(settings_key)
        if not env_var:
            return None
        return getattr(self.config, env_var, None) or None

    def is_set_in_env(self, settings_key: str) -> bool:
        return self._env_value(settings_key) is not None

    def get_setting(self, settings_key: str) -> Optional[str]:
        value = self._env_value(settings_key)
        if value:
            return value
        value = self.store.get(settings_key)
        return value or None

    def get_username(self) -> Optional[str]:
        return self.get_setting(SETTINGS_BA_USERNAME)

    def get_password(self) -> Optional[str]:
        return self.get_setting(SETTINGS_BA_PASSWORD)

    def save_settings(self, values: Mapping[str, Optional[str]]) -> None:
        """Persist settings, leaving keys controlled by the environment untouched."""
        for settings_key in self.available_settings_keys().values():
            if settings_key not in values:
                continue
            if self.is_set_in_env(settings_key):
                logger.info(f"Credentials: '{settings_key}' is set via {self.get_env_variable(settings_key)}, not persisting.")
                continue
            self.store.set(settings_key, values[settings_key])
        self.store.save()
