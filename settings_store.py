import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class SettingsStore:
    """Persisted `chip_api.settings` values kept in a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._values: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._values is None:
            if self.path.exists():
                with self.path.open(encoding="utf-8") as handle:
                    data = json.load(handle)
                if not isinstance(data, dict):
                    raise ValueError(f"Settings file {self.path} must contain a JSON object")
                self._values = data
            else:
                self._values = {}
        return self._values

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = value

    def save(self) -> None:
        values = self._load()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(values, handle, indent=2, sort_keys=True)
        logger.info(f"SettingsStore: Saved {len(values)} settings to {self.path}.")
