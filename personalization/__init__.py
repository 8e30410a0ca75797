"""Spaced repetition and personalization engine for quiz sessions"""

from personalization.engine import PersonalizationEngine
from personalization.store import BaseStore, DatabaseStore, JsonFileStore, MemoryStore, StorageError, get_store

__all__ = [
    "PersonalizationEngine",
    "BaseStore",
    "DatabaseStore",
    "JsonFileStore",
    "MemoryStore",
    "StorageError",
    "get_store",
]
