"""Entity storage: the abstract store contract and its in-memory engine."""

from fieldflow.storage.base import Storage
from fieldflow.storage.memory import MemStorage

__all__ = ["MemStorage", "Storage"]
