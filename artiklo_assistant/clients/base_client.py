# artiklo_assistant/clients/base_client.py
import logging
from abc import ABC
from typing import Any, Dict, List, Optional, Union

import httpx

from artiklo_assistant.config import settings
from artiklo_assistant.utils.api_utils import handle_api_error, prepare_auth_headers
from artiklo_assistant.utils.log_utils import redact

logger = logging.getLogger(__name__)


class SupabaseBaseClient(ABC):
    """Abstract base class for all Supabase collaborators."""
    pass


class SupabaseHttpClient(SupabaseBaseClient):
    """
    Async HTTP client for the Supabase project (edge functions, REST, RPC).

    Requests are sent exactly once: a failed call surfaces immediately and the
    caller decides what to do. ``timeout`` is the only upper bound on a stalled
    call; ``None`` disables it.
    """

    def __init__(
            self,
            base_url: Optional[str] = None,
            api_key: Optional[str] = None,
            timeout: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        resolved_base_url = base_url or settings.SUPABASE_URL
        self.base_url = resolved_base_url.rstrip("/")
        self.api_key = api_key or settings.SUPABASE_ANON_KEY
        self.timeout = timeout if timeout is not None else settings.SERVICE_TIMEOUT
        self._transport = transport
        # Created lazily on first use or in __aenter__
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Closes the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def _make_request(
            self,
            method: str,
            endpoint: str,
            token: Optional[str] = None,
            is_json_response: bool = True,
            **kwargs,
    ) -> Union[Dict[str, Any], List[Any], bytes, None]:
        """
        Performs one authorized HTTP request and returns decoded JSON (or raw
        bytes). Raises ``httpx.HTTPStatusError`` / ``httpx.RequestError``
        (``httpx.DecodingError`` for a body that is not JSON).
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        is_multipart = "files" in kwargs or "data" in kwargs
        headers = prepare_auth_headers(token, self.api_key, json_body=not is_multipart)
        headers.update(kwargs.pop("headers", {}) or {})

        logger.debug(f"{method} {url} headers={redact(headers)}")
        client = await self._get_client()
        response = await client.request(method, url, headers=headers, **kwargs)
        await handle_api_error(response, f"{method} {url}")

        if response.status_code == 204 or not response.content:
            return {} if is_json_response else None

        if not is_json_response:
            return response.content

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to decode JSON response from {method} {response.url}")
            raise httpx.DecodingError("Response body is not valid JSON", request=response.request) from e
