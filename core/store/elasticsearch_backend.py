"""
Elasticsearch implementation of SegmentStore.

Talks to the Elasticsearch REST API over httpx with ApiKey auth.
Transport failures are mapped onto the storage error kinds.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Set
from urllib.parse import quote

import httpx

from core.tm.errors import StorageProtocolError, StorageTimeout, StorageUnavailable
from core.tm.models import BulkItemResult, BulkOperation, StoredSegment

from .queries import INDEX_BODY, build_bulk_lines, build_exact_query, build_fuzzy_query

logger = logging.getLogger(__name__)


class ElasticsearchStore:
    """
    SegmentStore backed by one Elasticsearch index per target language.

    Bulk writes use refresh=wait_for so segments are searchable as soon
    as bulk() returns.
    """

    def __init__(
        self,
        node: str,
        api_key: str = "",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.node = node.rstrip("/")
        self.api_key = api_key
        self.timeout = httpx.Timeout(timeout)
        self._client = client
        self._known_collections: Set[str] = set()

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"ApiKey {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.node,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    # ==================== TRANSPORT ====================

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("Elasticsearch timeout: %s %s", method, path)
            raise StorageTimeout("Elasticsearch timeout", details=str(e)) from e
        except httpx.TransportError as e:
            logger.error("Elasticsearch connection error: %s", e)
            raise StorageUnavailable("Elasticsearch connection error", details=str(e)) from e

    @staticmethod
    def _error_details(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict) and "error" in body:
            return body["error"]
        return body

    def _check(self, response: httpx.Response) -> httpx.Response:
        if response.status_code >= 400:
            details = self._error_details(response)
            logger.error("Elasticsearch error %s: %s", response.status_code, details)
            raise StorageProtocolError(
                f"Elasticsearch request failed with status {response.status_code}",
                details=details,
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _path(name: str, suffix: str = "") -> str:
        return f"/{quote(name, safe='')}{suffix}"

    # ==================== COLLECTIONS ====================

    async def ensure_collection(self, name: str) -> None:
        if name in self._known_collections:
            return

        response = await self._request("HEAD", self._path(name))
        if response.status_code == 404:
            response = await self._request("PUT", self._path(name), json=INDEX_BODY)
            if response.status_code == 400 and self._already_exists(response):
                logger.debug("Index %s created concurrently", name)
            else:
                self._check(response)
                logger.info("Created index %s", name)
        else:
            self._check(response)

        self._known_collections.add(name)

    def _already_exists(self, response: httpx.Response) -> bool:
        details = self._error_details(response)
        return isinstance(details, dict) and details.get("type") == "resource_already_exists_exception"

    # ==================== LOOKUPS ====================

    async def _search_one(self, name: str, body: dict) -> Optional[StoredSegment]:
        response = self._check(
            await self._request("POST", self._path(name, "/_search"), json=body)
        )
        hits = response.json().get("hits", {}).get("hits", [])
        if not hits:
            return None

        hit = hits[0]
        source = hit.get("_source") or {}
        return StoredSegment(
            id=hit["_id"],
            source_lang=source.get("source_lang", ""),
            target_lang=source.get("target_lang", ""),
            source_text=source.get("source_text", ""),
            translated_text=source.get("translated_text") or "",
        )

    async def find_exact(
        self, name: str, source_lang: str, target_lang: str, source_text: str
    ) -> Optional[StoredSegment]:
        return await self._search_one(
            name, build_exact_query(source_lang, target_lang, source_text)
        )

    async def find_fuzzy(
        self, name: str, source_lang: str, target_lang: str, source_text: str
    ) -> Optional[StoredSegment]:
        return await self._search_one(
            name, build_fuzzy_query(source_lang, target_lang, source_text)
        )

    # ==================== WRITES ====================

    async def bulk(self, name: str, operations: List[BulkOperation]) -> List[BulkItemResult]:
        if not operations:
            return []

        payload = "".join(
            json.dumps(line, ensure_ascii=False) + "\n"
            for line in build_bulk_lines(name, operations)
        )
        response = self._check(await self._request(
            "POST",
            "/_bulk",
            params={"refresh": "wait_for"},
            content=payload.encode("utf-8"),
            headers={"Content-Type": "application/x-ndjson"},
        ))

        items = response.json().get("items", [])
        if len(items) != len(operations):
            raise StorageProtocolError(
                "Bulk response does not match the submitted operations",
                details={"submitted": len(operations), "returned": len(items)},
            )

        results = []
        for entry in items:
            item = next(iter(entry.values()), {})
            results.append(BulkItemResult(id=item.get("_id"), error=item.get("error")))
        return results

    # ==================== HEALTH ====================

    async def ping(self) -> bool:
        self._check(await self._request("GET", "/"))
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
