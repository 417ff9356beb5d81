"""Quiz Storage - Contrato Storage, backends e repositorio tipado."""

from .agentfs_storage import AgentFSStorage
from .base import KeyedLocks, MergeFn, Predicate, Record, Storage
from .memory import InMemoryStorage
from .quiz_store import QuizStore

__all__ = [
    "Storage",
    "Record",
    "Predicate",
    "MergeFn",
    "KeyedLocks",
    "InMemoryStorage",
    "AgentFSStorage",
    "QuizStore",
]
