# artiklo_assistant/clients/storage_client.py
import logging
from typing import Any, Dict, Optional

import httpx

from artiklo_assistant.config import settings
from artiklo_assistant.exceptions import PersistenceError
from artiklo_assistant.utils.api_utils import extract_error_message
from .base_client import SupabaseHttpClient

logger = logging.getLogger(__name__)


class StorageClient(SupabaseHttpClient):
    """Client for the ``documents`` table and the credit RPC (PostgREST)."""

    async def _call(self, endpoint: str, token: Optional[str], **kwargs) -> Any:
        try:
            return await self._make_request("POST", endpoint, token=token, **kwargs)
        except httpx.HTTPStatusError as e:
            raise PersistenceError(extract_error_message(e.response)) from e
        except httpx.RequestError as e:
            raise PersistenceError(f"Veritabanına ulaşılamadı: {type(e).__name__}") from e

    async def insert_document(self, token: Optional[str], row: Dict[str, Any]) -> None:
        """POST rest/v1/{documents_table}"""
        logger.debug(f"Inserting row into {settings.DOCUMENTS_TABLE}")
        await self._call(
            f"rest/v1/{settings.DOCUMENTS_TABLE}",
            token,
            json=row,
            headers={"Prefer": "return=minimal"},
        )

    async def decrement_credit(self, token: Optional[str], user_id: str) -> None:
        """POST rest/v1/rpc/decrement_credit; always one unit."""
        await self._call(
            f"rest/v1/rpc/{settings.CREDIT_RPC}",
            token,
            json={"user_id_param": user_id},
        )
