"""
HTTP client for Algolia-compatible search backends.

The client sends one query, or a batch of queries in a single request, and
returns the decoded JSON results. It performs no retries: a failed request
surfaces immediately.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote, urlencode

import aiohttp
from pydantic import BaseModel

from hits_search.utils.errors import TransportError
from hits_search.utils.logging import get_logger

logger = get_logger(__name__)


class SearchClientConfig(BaseModel):
    """Configuration for the search backend client."""

    application_id: str
    api_key: str
    api_url: Optional[str] = None
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        url = self.api_url or f"https://{self.application_id}-dsn.algolia.net"
        return url.rstrip("/")


class BackendAPIError(Exception):
    """Structured error returned by the search backend."""

    def __init__(self, message: str, status_code: int, payload: Optional[Dict[str, Any]] = None):
        """
        Initialize a backend error.

        Args:
            message: Message reported by the backend
            status_code: HTTP status code of the failed request
            payload: Decoded error body, if any
        """
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(f"{status_code}: {message}")


def encode_params(params: Dict[str, Any]) -> str:
    """
    Encode request parameters as a query string.

    Strings are sent as is; lists, numbers and booleans are JSON encoded.

    Args:
        params: Parameter dictionary

    Returns:
        URL-encoded parameter string
    """
    return urlencode({
        key: value if isinstance(value, str) else json.dumps(value)
        for key, value in params.items()
    })


class SearchClient:
    """
    Client for the backend's search endpoints.

    A new HTTP session is opened per call; the client keeps no state
    between calls and may be shared by concurrent searches.
    """

    def __init__(self, config: SearchClientConfig):
        """
        Initialize the search client.

        Args:
            config: Client configuration
        """
        self.config = config
        logger.info(f"Search client initialized for {config.base_url}")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Algolia-Application-Id": self.config.application_id,
            "X-Algolia-API-Key": self.config.api_key,
        }

    async def search(self, index_name: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run one query.

        Args:
            index_name: Index to search
            params: Request parameters

        Returns:
            Raw query result

        Raises:
            BackendAPIError: If the backend rejects the query
            TransportError: If the backend cannot be reached
        """
        path = f"/1/indexes/{quote(index_name, safe='')}/query"
        return await self._post(path, {"params": encode_params(params)})

    async def multiple_queries(self, requests: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Run several queries in a single request.

        The call is atomic: either every query succeeds or the call fails.

        Args:
            requests: Entries with ``indexName`` and ``params``

        Returns:
            Raw query results, in request order

        Raises:
            BackendAPIError: If the backend rejects the batch
            TransportError: If the backend cannot be reached or answers malformed data
        """
        body = {
            "requests": [
                {"indexName": request["indexName"], "params": encode_params(request["params"])}
                for request in requests
            ],
            "strategy": "none",
        }
        data = await self._post("/1/indexes/*/queries", body)

        results = data.get("results")
        if not isinstance(results, list) or len(results) != len(requests):
            raise TransportError(
                f"Expected {len(requests)} results from batch request, "
                f"got {len(results) if isinstance(results, list) else 'none'}"
            )
        return results

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.config.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=body, headers=self._get_headers()) as response:
                    try:
                        data = await response.json(content_type=None)
                    except json.JSONDecodeError:
                        data = None

                    if not 200 <= response.status < 300:
                        payload = data if isinstance(data, dict) else {}
                        message = payload.get("message") or f"HTTP {response.status}"
                        logger.error(f"Search backend error: HTTP {response.status} - {message}")
                        raise BackendAPIError(message, response.status, payload)

                    if not isinstance(data, dict):
                        raise TransportError(f"Malformed response from {path}")

                    return data

        except aiohttp.ClientError as e:
            logger.error(f"HTTP error making search request: {e}")
            raise TransportError(f"HTTP error: {e}") from e

        except asyncio.TimeoutError as e:
            logger.error("Timeout making search request")
            raise TransportError("Request timed out") from e
