"""Study guide persistence backends."""

import asyncio
import logging
from typing import Any, Optional, Protocol

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import Settings, settings as default_settings
from src.services.study_generator.models import ContentDocument

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Exception raised when the document store call fails."""

    pass


class DocumentStore(Protocol):
    """Key-value store for generated study guides."""

    async def get(self, key: str) -> Optional[ContentDocument]:
        ...

    async def put(
        self,
        key: str,
        document: ContentDocument,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        ...


class InMemoryDocumentStore:
    """Process-local store, used for development and tests."""

    def __init__(self):
        self._documents: dict[str, ContentDocument] = {}
        self._metadata: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[ContentDocument]:
        async with self._lock:
            return self._documents.get(key)

    async def put(
        self,
        key: str,
        document: ContentDocument,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        async with self._lock:
            self._documents[key] = document
            self._metadata[key] = dict(metadata or {})
        logger.debug(f"Stored study guide {key[:12]}")

    def __len__(self) -> int:
        return len(self._documents)


class SupabaseDocumentStore:
    """Store backed by a Supabase table through the PostgREST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        table: Optional[str] = None,
    ):
        self.base_url = (base_url or default_settings.supabase_url).rstrip("/")
        self.service_key = service_key or default_settings.supabase_service_key
        self.table = table or default_settings.supabase_table

    def _get_client(self) -> httpx.AsyncClient:
        """Create an async HTTP client with service-role authentication."""
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers={
                "apikey": self.service_key,
                "Authorization": f"Bearer {self.service_key}",
                "Content-Type": "application/json",
            },
            timeout=30.0,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.ConnectError)),
    )
    async def get(self, key: str) -> Optional[ContentDocument]:
        """
        Look up a cached study guide.

        Returns:
            The stored ContentDocument, or None if the key is not cached
        """
        async with self._get_client() as client:
            response = await client.get(
                f"/{self.table}",
                params={"cache_key": f"eq.{key}", "select": "content", "limit": "1"},
            )
            response.raise_for_status()
            rows = response.json()

        if not rows:
            return None
        return ContentDocument.model_validate(rows[0]["content"])

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.ConnectError)),
    )
    async def put(
        self,
        key: str,
        document: ContentDocument,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Upsert a study guide under its cache key.

        Raises:
            StoreError: If the insert is rejected
        """
        row = {
            "cache_key": key,
            "content": document.model_dump(by_alias=True),
            **(metadata or {}),
        }
        async with self._get_client() as client:
            response = await client.post(
                f"/{self.table}",
                params={"on_conflict": "cache_key"},
                json=row,
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
            if response.status_code in (400, 409, 422):
                raise StoreError(f"Failed to store study guide: {response.text}")
            response.raise_for_status()

        logger.info(f"Stored study guide {key[:12]} in {self.table}")

    async def check_health(self) -> bool:
        """
        Check if the Supabase REST endpoint is reachable.

        Returns:
            True if service is healthy, False otherwise
        """
        try:
            async with self._get_client() as client:
                response = await client.get(f"/{self.table}", params={"limit": "1"})
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Supabase health check failed: {e}")
            return False


def create_document_store(cfg: Optional[Settings] = None) -> DocumentStore:
    """Build the store selected by STORE_BACKEND."""
    cfg = cfg or default_settings
    backend = cfg.store_backend.lower()

    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "supabase":
        if not cfg.supabase_url or not cfg.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required when STORE_BACKEND=supabase"
            )
        return SupabaseDocumentStore(
            base_url=cfg.supabase_url,
            service_key=cfg.supabase_service_key,
            table=cfg.supabase_table,
        )
    raise ValueError(f"Unsupported STORE_BACKEND: {backend}. Supported: memory, supabase")
