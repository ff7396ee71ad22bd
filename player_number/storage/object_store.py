import json
from abc import ABC, abstractmethod
from typing import Any

JSON_CONTENT_TYPE = "application/json"


class StoreError(Exception):
    """Custom exception for object store failures."""

    pass


class StoreNotFoundError(StoreError):
    """Raised when a key does not exist in the store."""

    pass


class ObjectStore(ABC):
    """Whole-document key/blob store. A put replaces the previous blob."""

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Returns the blob stored under key; StoreNotFoundError if absent."""
        pass

    @abstractmethod
    async def put(self, key: str, body: bytes, content_type: str) -> None:
        pass

    async def get_json(self, key: str) -> Any:
        body = await self.get(key)
        try:
            return json.loads(body)
        except ValueError as e:
            raise StoreError(f"Stored object {key!r} is not valid JSON") from e

    async def put_json(self, key: str, payload: Any) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        await self.put(key, body, JSON_CONTENT_TYPE)
