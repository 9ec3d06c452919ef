"""Key-value storage and the progress repository."""
from axon.persistence.models import AdEconomyState, UserStats
from axon.persistence.repository import ProgressRepository
from axon.persistence.store import InMemoryKeyValueStore, KeyValueStore, SQLiteKeyValueStore

__all__ = [
    "AdEconomyState",
    "UserStats",
    "ProgressRepository",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SQLiteKeyValueStore",
]
