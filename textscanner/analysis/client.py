"""HTTP client for the file-storing service."""

import logging
from typing import Optional

import httpx

from textscanner.core.errors import NotFoundError, UpstreamUnavailableError

log = logging.getLogger(__name__)


class StorageClient:
    """
    Fetches file content from the storage service by id.
    A 404 becomes NotFoundError; anything else that is not a 2xx becomes UpstreamUnavailableError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        log.debug("Storage client base_url=%s", self._base_url)

    async def get_content(self, file_id: str) -> bytes:
        """GET /files/{file_id}. Returns the raw bytes."""
        log.debug("GET /files/%s", file_id)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.get(f"{self._base_url}/files/{file_id}")
        except httpx.TimeoutException as e:
            log.warning("Storage service timed out for file %s: %s", file_id, e)
            raise UpstreamUnavailableError(f"Storage service timed out fetching file {file_id}") from e
        except httpx.HTTPError as e:
            log.warning("Storage service unreachable for file %s: %s", file_id, e)
            raise UpstreamUnavailableError(f"Storage service unavailable: {e}") from e
        if r.status_code == 404:
            raise NotFoundError(f"File {file_id} not found", file_id=file_id)
        if r.is_error:
            log.warning("Storage service returned %d for file %s", r.status_code, file_id)
            raise UpstreamUnavailableError(
                f"Storage service returned {r.status_code} for file {file_id}"
            )
        return r.content

    async def is_healthy(self) -> bool:
        """GET /health on the storage service."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.get(f"{self._base_url}/health")
        except httpx.HTTPError as e:
            log.warning("Storage health check failed: %s", e)
            return False
        return r.is_success
