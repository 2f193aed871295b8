from datetime import datetime
from typing import Dict, Optional, Protocol

from beanie.operators import Set

from storefront.models.storageModel import StorageEntry


class KeyValueStorage(Protocol):
    """Durable string storage the cart writes through to"""

    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """In-process storage, survives only as long as the object does"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class MongoKeyValueStorage:
    """Storage backed by the StorageEntry collection, one namespace per session"""

    def __init__(self, namespace: str):
        self.namespace = namespace

    def _query(self, key: str):
        return StorageEntry.find_one(
            StorageEntry.namespace == self.namespace,
            StorageEntry.key == key,
        )

    async def get_item(self, key: str) -> Optional[str]:
        entry = await self._query(key)
        return entry.value if entry else None

    async def set_item(self, key: str, value: str) -> None:
        # One atomic upsert keyed on the unique (namespace, key) pair
        await self._query(key).update(
            Set({StorageEntry.value: value, StorageEntry.updated_at: datetime.utcnow()}),
            upsert=True,
        )

    async def remove_item(self, key: str) -> None:
        await self._query(key).delete()
