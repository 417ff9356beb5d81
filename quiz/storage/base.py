"""Storage Base - Contrato de persistencia consumido pelo core."""

import asyncio
from collections import defaultdict
from collections.abc import Callable
from typing import Any, Protocol

Record = dict[str, Any]
Predicate = Callable[[Record], bool]
MergeFn = Callable[[Record | None], Record]


class Storage(Protocol):
    """Armazenamento chave-valor por colecao.

    ``upsert_with_merge`` deve ser atomico por chave: duas chamadas
    concorrentes para a mesma chave nunca leem o mesmo estado anterior.
    Se ``merge_fn`` levantar excecao nada e gravado.
    """

    async def get(self, collection: str, key: str) -> Record | None: ...

    async def put(self, collection: str, key: str, record: Record) -> None: ...

    async def query(
        self, collection: str, predicate: Predicate | None = None
    ) -> list[Record]: ...

    async def upsert_with_merge(self, collection: str, key: str, merge_fn: MergeFn) -> Record: ...


class KeyedLocks:
    """Um ``asyncio.Lock`` por (colecao, chave)."""

    def __init__(self):
        self._locks: defaultdict[tuple[str, str], asyncio.Lock] = defaultdict(asyncio.Lock)

    def get(self, collection: str, key: str) -> asyncio.Lock:
        return self._locks[(collection, key)]
