"""
Preference Store — remembers the last stadium, last tier and achievements.

Key → string get/set. A missing key, a missing file, or an unreadable
file never errors; callers get their default.
"""

import json
from pathlib import Path
from typing import Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)

LAST_STADIUM = "last_stadium"
LAST_TIER = "last_tier"
ACHIEVEMENTS = "achievements"


class PreferenceStore(Protocol):
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryPreferenceStore:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFilePreferenceStore:
    """Preferences persisted as a flat JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("preferences_unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("preferences_not_object", path=str(self.path))
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._load().get(key, default)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_achievements(store: PreferenceStore) -> list[str]:
    raw = store.get(ACHIEVEMENTS)
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except ValueError:
        logger.warning("achievements_unreadable")
        return []
    return [str(a) for a in items] if isinstance(items, list) else []


def save_achievements(store: PreferenceStore, achievements: list[str]) -> None:
    store.set(ACHIEVEMENTS, json.dumps(achievements))
