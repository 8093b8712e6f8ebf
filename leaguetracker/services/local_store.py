# leaguetracker/services/local_store.py

# SECTION: MODULE DOCSTRING
"""A small persistent string key-value store backed by one JSON file.

Values are stored as strings, exactly as written; callers that keep structured
data (completion lists) serialize it themselves and must cope with values they
cannot parse.
"""

# SECTION: IMPORTS
from __future__ import annotations

from pathlib import Path

from leaguetracker.config import LEAGUE_DATA_PATH, STORE_FILENAME
from leaguetracker.helpers._json import load_json, save_json
from leaguetracker.helpers._logger import log


# KLASS: LocalStore
class LocalStore:
    """String key-value store persisted to ``<data_dir>/store.json``."""

    def __init__(self, data_dir: Path = LEAGUE_DATA_PATH, filename: str = STORE_FILENAME):
        self.path = Path(data_dir) / filename
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            raw = load_json(self.path)
            if raw is None:
                self._data = {}
            elif isinstance(raw, dict):
                self._data = {str(key): value for key, value in raw.items() if isinstance(value, str)}
            else:
                log.warning(f"Local store '{self.path}' is not a JSON object; starting empty.")
                self._data = {}
        return self._data

    def _persist(self) -> bool:
        return save_json(self._load(), self.path)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> bool:
        """Store ``value`` under ``key`` and write the file. Returns False if writing failed."""
        self._load()[key] = value
        return self._persist()

    def remove_item(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return True
        del data[key]
        return self._persist()

    def keys(self) -> list[str]:
        return list(self._load())

    def __contains__(self, key: object) -> bool:
        return key in self._load()

    def __repr__(self) -> str:
        return f"LocalStore(path='{self.path}')"
