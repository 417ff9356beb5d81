"""In-Memory Storage - Implementacao do Storage em memoria do processo."""

import copy

from core.logger import get_logger

from .base import KeyedLocks, MergeFn, Predicate, Record

logger = get_logger("memory_storage")


class InMemoryStorage:
    """Storage em dicionarios, uma instancia por aplicacao.

    Registros sao copiados na entrada e na saida para que o chamador
    nunca altere o estado armazenado por referencia.
    """

    def __init__(self):
        self._data: dict[str, dict[str, Record]] = {}
        self._locks = KeyedLocks()

    async def get(self, collection: str, key: str) -> Record | None:
        record = self._data.get(collection, {}).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def put(self, collection: str, key: str, record: Record) -> None:
        self._data.setdefault(collection, {})[key] = copy.deepcopy(record)

    async def query(self, collection: str, predicate: Predicate | None = None) -> list[Record]:
        records = [copy.deepcopy(r) for r in self._data.get(collection, {}).values()]
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    async def upsert_with_merge(self, collection: str, key: str, merge_fn: MergeFn) -> Record:
        async with self._locks.get(collection, key):
            current = await self.get(collection, key)
            merged = merge_fn(current)
            await self.put(collection, key, merged)
            logger.debug(f"Upsert {collection}:{key}")
            return copy.deepcopy(merged)

    def clear(self) -> None:
        """Remove todos os registros."""
        self._data.clear()
