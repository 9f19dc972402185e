"""HTTP client for a deployed razlib catalog service.

Used by ``razlib remote`` to compare a deployment with the local library, and
usable from scripts:

    with CatalogClient("https://raz.example.workers.dev") as client:
        for level in client.get_levels():
            print(level.id, level.book_count)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from razlib.catalog.assembler import BookRecord
from razlib.exceptions import CatalogServiceError
from razlib.schemas.api import LevelPayload, validate_books_response, validate_levels_response
from razlib.utils.retry import NETWORK_EXCEPTIONS, retry_with_backoff

logger = logging.getLogger(__name__)


class CatalogClient:
    """Client for the catalog API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        *,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Service root (e.g., "http://127.0.0.1:8787")
            timeout: Request timeout in seconds
            max_retries: Retries on connection errors and timeouts
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> CatalogClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _get_json(self, path: str) -> dict[str, Any]:
        """GET ``path`` and decode the JSON body.

        Network errors are retried; HTTP errors and bad bodies are not.

        Raises:
            CatalogServiceError: On connection failure, HTTP error or non-JSON body
        """
        url = f"{self.base_url}{path}"

        @retry_with_backoff(max_retries=self.max_retries, retry_exceptions=NETWORK_EXCEPTIONS)
        def _send() -> httpx.Response:
            return self._get_client().get(path)

        try:
            response = _send()
        except httpx.TimeoutException as e:
            raise CatalogServiceError(f"Request to {url} timed out: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise CatalogServiceError(f"Failed to connect to {url}: {e}", url=url) from e

        if response.status_code >= 400:
            raise CatalogServiceError(
                f"API error: {response.status_code} - {response.text[:200]}",
                url=url,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogServiceError(f"Invalid JSON from {url}: {e}", url=url) from e
        if not isinstance(data, dict):
            raise CatalogServiceError(f"Unexpected response shape from {url}", url=url)
        return data

    def get_levels(self) -> list[LevelPayload]:
        """Fetch every level with its book count.

        Raises:
            CatalogServiceError: If the request fails or the response is malformed
        """
        logger.debug("Fetching levels from %s", self.base_url)
        data = self._get_json("/api/levels")
        try:
            return validate_levels_response(data).levels
        except PydanticValidationError as e:
            raise CatalogServiceError(f"Malformed levels response: {e}", url=self.base_url) from e

    def get_books(self, level: str) -> list[BookRecord]:
        """Fetch the book list of one level.

        Raises:
            CatalogServiceError: If the request fails (404 for unknown levels)
        """
        logger.debug("Fetching books for level %s from %s", level, self.base_url)
        data = self._get_json(f"/api/levels/{quote(level, safe='')}/books")
        try:
            validated = validate_books_response(data)
        except PydanticValidationError as e:
            raise CatalogServiceError(f"Malformed books response: {e}", url=self.base_url) from e
        return [
            BookRecord(
                id=book.id,
                number=book.number,
                title=book.title,
                level=book.level,
                pdf_path=book.pdf_path,
                audio_path=book.audio_path,
            )
            for book in validated.books
        ]
