"""
Persistence for per-user personalization data.

Every user owns three blobs: quiz config, memory records and learning
efficiency metrics. Backends only move JSON-compatible values in and out
of their medium; BaseStore handles (de)serialization and degrades to
defaults when the medium fails or holds corrupt data.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError

from personalization.config import settings
from personalization.schemas import LearningEfficiencyMetrics, MemoryRecord, PersonalizedConfig

logger = logging.getLogger(__name__)

QUIZ_CONFIG_KEY = "quiz_config"
MEMORY_STRENGTH_KEY = "memory_strength"
LEARNING_METRICS_KEY = "learning_metrics"

_records_adapter = TypeAdapter(List[MemoryRecord])


class StorageError(Exception):
    """The storage medium could not be read or written"""


def get_store(backend: str = None) -> "BaseStore":
    """Factory function to return the configured store backend"""
    backend = (backend or settings.store_backend).lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "database":
        return DatabaseStore()
    if backend == "json":
        return JsonFileStore(settings.data_dir)
    raise ValueError(f"Unknown store backend: {backend}. Use json, database or memory")


class BaseStore:
    """Load/save pairs for the three per-user blobs"""

    def _read(self, user_id: str, key: str) -> Optional[Any]:
        """Return the stored value, or None when nothing is stored yet"""
        raise NotImplementedError

    def _write(self, user_id: str, key: str, value: Any) -> None:
        raise NotImplementedError

    def _load(self, user_id: str, key: str) -> Optional[Any]:
        try:
            return self._read(user_id, key)
        except StorageError as e:
            logger.warning("Failed to load %s for user %s: %s", key, user_id, e)
            return None

    def _save(self, user_id: str, key: str, value: Any) -> bool:
        try:
            self._write(user_id, key, value)
        except StorageError as e:
            logger.error("Failed to save %s for user %s: %s", key, user_id, e)
            return False
        return True

    # Memory records

    def load_records(self, user_id: str) -> List[MemoryRecord]:
        data = self._load(user_id, MEMORY_STRENGTH_KEY)
        if data is None:
            return []
        try:
            return _records_adapter.validate_python(data)
        except ValueError as e:
            logger.warning("Discarding corrupt memory records for user %s: %s", user_id, e)
            return []

    def save_records(self, user_id: str, records: List[MemoryRecord]) -> bool:
        return self._save(user_id, MEMORY_STRENGTH_KEY, _records_adapter.dump_python(records, mode="json"))

    # Quiz config

    def load_config(self, user_id: str) -> PersonalizedConfig:
        data = self._load(user_id, QUIZ_CONFIG_KEY)
        if data is None:
            return PersonalizedConfig(user_id=user_id)
        try:
            return PersonalizedConfig.model_validate(data)
        except ValueError as e:
            logger.warning("Discarding corrupt quiz config for user %s: %s", user_id, e)
            return PersonalizedConfig(user_id=user_id)

    def save_config(self, config: PersonalizedConfig) -> bool:
        return self._save(config.user_id, QUIZ_CONFIG_KEY, config.model_dump(mode="json"))

    # Learning efficiency metrics

    def load_metrics(self, user_id: str) -> LearningEfficiencyMetrics:
        data = self._load(user_id, LEARNING_METRICS_KEY)
        if data is None:
            return LearningEfficiencyMetrics(user_id=user_id)
        try:
            return LearningEfficiencyMetrics.model_validate(data)
        except ValueError as e:
            logger.warning("Discarding corrupt learning metrics for user %s: %s", user_id, e)
            return LearningEfficiencyMetrics(user_id=user_id)

    def save_metrics(self, metrics: LearningEfficiencyMetrics) -> bool:
        return self._save(metrics.user_id, LEARNING_METRICS_KEY, metrics.model_dump(mode="json"))


class MemoryStore(BaseStore):
    """Process-local store, values kept as JSON text"""

    def __init__(self):
        self._data: Dict[Tuple[str, str], str] = {}

    def _read(self, user_id: str, key: str) -> Optional[Any]:
        raw = self._data.get((user_id, key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"malformed JSON: {e}") from e

    def _write(self, user_id: str, key: str, value: Any) -> None:
        self._data[(user_id, key)] = json.dumps(value)


class JsonFileStore(BaseStore):
    """One JSON file per user and blob under a local directory"""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def path_for(self, user_id: str, key: str) -> Path:
        return self.data_dir / f"{key}_{quote(user_id, safe='')}.json"

    def _read(self, user_id: str, key: str) -> Optional[Any]:
        path = self.path_for(user_id, key)
        try:
            if not path.exists():
                return None
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"{path}: {e}") from e

    def _write(self, user_id: str, key: str, value: Any) -> None:
        path = self.path_for(user_id, key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"{path}: {e}") from e


class DatabaseStore(BaseStore):
    """
    Blobs kept in the user_settings table, one row per (user, key).

    Saves overwrite the whole blob, so concurrent writers for the same
    user follow last-write-wins.
    """

    def __init__(self, session_factory=None):
        if session_factory is None:
            from personalization.database import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory

    def _read(self, user_id: str, key: str) -> Optional[Any]:
        from personalization.crud import get_setting

        db = self.session_factory()
        try:
            setting = get_setting(db, user_id, key)
            return setting.setting_value if setting else None
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        finally:
            db.close()

    def _write(self, user_id: str, key: str, value: Any) -> None:
        from personalization.crud import upsert_setting

        db = self.session_factory()
        try:
            upsert_setting(db, user_id, key, value)
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(str(e)) from e
        finally:
            db.close()
