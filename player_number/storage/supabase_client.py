# player_number/storage/supabase_client.py
from typing import Optional

import httpx
from loguru import logger
from storage3.exceptions import StorageApiError
from supabase import AsyncClient, create_async_client

from player_number.config.settings import AppSettings
from .object_store import ObjectStore, StoreError, StoreNotFoundError


async def initialize_supabase(settings: AppSettings) -> AsyncClient:
    """Creates the async Supabase client used for snapshot storage."""
    key_snippet = f"{settings.supabase_key[:5]}...{settings.supabase_key[-5:]}"
    logger.debug(
        f"Initializing async Supabase client for {settings.supabase_url} (key {key_snippet})"
    )
    try:
        client: AsyncClient = await create_async_client(
            settings.supabase_url, settings.supabase_key
        )
    except Exception as e:
        raise StoreError(f"Failed to initialize Supabase client: {e}") from e
    logger.success("Async Supabase client initialized successfully.")
    return client


def _is_not_found(error: StorageApiError) -> bool:
    status = str(getattr(error, "status", ""))
    message = str(getattr(error, "message", error)).lower()
    return status == "404" or "not found" in message


class SupabaseObjectStore(ObjectStore):
    """ObjectStore over one Supabase Storage bucket."""

    def __init__(self, client: AsyncClient, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    async def from_settings(
        cls, settings: AppSettings, client: Optional[AsyncClient] = None
    ) -> "SupabaseObjectStore":
        client = client or await initialize_supabase(settings)
        return cls(client, settings.storage_bucket)

    async def get(self, key: str) -> bytes:
        try:
            body = await self.client.storage.from_(self.bucket).download(key)
        except StorageApiError as e:
            if _is_not_found(e):
                raise StoreNotFoundError(f"{self.bucket}/{key} not found") from e
            logger.error(f"Storage error reading {self.bucket}/{key}: {e}")
            raise StoreError(f"Failed to read {self.bucket}/{key}") from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error reading {self.bucket}/{key}: {e!r}")
            raise StoreError(f"Failed to read {self.bucket}/{key}") from e
        logger.debug(f"Read {len(body)} bytes from {self.bucket}/{key}")
        return body

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            await self.client.storage.from_(self.bucket).upload(
                key,
                body,
                file_options={"content-type": content_type, "upsert": "true"},
            )
        except (StorageApiError, httpx.HTTPError) as e:
            logger.error(f"Error writing {self.bucket}/{key}: {e}")
            raise StoreError(f"Failed to write {self.bucket}/{key}") from e
        logger.success(f"Wrote {len(body)} bytes to {self.bucket}/{key}")
