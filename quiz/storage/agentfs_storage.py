"""AgentFS Storage - Storage sobre o KV store do AgentFS."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.logger import get_logger

from .base import KeyedLocks, MergeFn, Predicate, Record

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

logger = get_logger("agentfs_storage")


class AgentFSStorage:
    """Storage persistente no KV do AgentFS.

    Estrutura de chaves:
        - {collection}:{key} -> registro (dict JSON-compativel)

    ``upsert_with_merge`` serializa por chave com lock local, o que cobre
    um processo unico de servidor (o AgentFS e um arquivo SQLite local).

    Example:
        >>> storage = AgentFSStorage(agentfs)
        >>> await storage.put("quizzes", "abc123", {"id": "abc123"})
        >>> await storage.get("quizzes", "abc123")
    """

    SEPARATOR = ":"

    def __init__(self, agentfs: AgentFS):
        """Inicializa storage com instancia do AgentFS.

        Args:
            agentfs: Instancia configurada do AgentFS
        """
        self.agentfs = agentfs
        self._locks = KeyedLocks()

    def _key(self, collection: str, key: str) -> str:
        """Gera chave completa no KV."""
        return f"{collection}{self.SEPARATOR}{key}"

    async def get(self, collection: str, key: str) -> Record | None:
        data = await self.agentfs.kv.get(self._key(collection, key))
        return data or None

    async def put(self, collection: str, key: str, record: Record) -> None:
        await self.agentfs.kv.set(self._key(collection, key), record)

    async def query(self, collection: str, predicate: Predicate | None = None) -> list[Record]:
        prefix = f"{collection}{self.SEPARATOR}"
        entries = await self.agentfs.kv.list(prefix=prefix)

        records: list[Record] = []
        for entry in entries:
            full_key = entry.get("key", "") if isinstance(entry, dict) else str(entry)
            if not full_key.startswith(prefix):
                continue
            record = await self.agentfs.kv.get(full_key)
            if not record:
                continue
            if predicate is None or predicate(record):
                records.append(record)
        return records

    async def upsert_with_merge(self, collection: str, key: str, merge_fn: MergeFn) -> Record:
        async with self._locks.get(collection, key):
            current = await self.get(collection, key)
            merged = merge_fn(current)
            await self.put(collection, key, merged)
            logger.debug(f"Upsert {collection}:{key}")
            return merged
