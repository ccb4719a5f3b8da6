# artiklo_assistant/clients/function_client.py
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from artiklo_assistant.config import settings
from artiklo_assistant.exceptions import RemoteServiceError
from artiklo_assistant.utils.api_utils import extract_error_message
from .base_client import SupabaseHttpClient

logger = logging.getLogger(__name__)

INVALID_RESPONSE = "Sunucudan geçersiz yanıt alındı."
EMPTY_RESPONSE = "Sunucudan boş yanıt alındı."


class EdgeFunctionClient(SupabaseHttpClient):
    """Invokes Supabase edge functions; every failure becomes ``RemoteServiceError``."""

    async def invoke(self, function_name: str, token: Optional[str] = None, **kwargs) -> Any:
        endpoint = f"functions/v1/{function_name}"
        try:
            return await self._make_request("POST", endpoint, token=token, **kwargs)
        except httpx.HTTPStatusError as e:
            raise RemoteServiceError(
                extract_error_message(e.response) or "API fonksiyon hatası",
                status_code=e.response.status_code,
            ) from e
        except httpx.DecodingError as e:
            raise RemoteServiceError(INVALID_RESPONSE) from e
        except httpx.RequestError as e:
            logger.error(f"Transport error calling {function_name}: {type(e).__name__}: {e}")
            raise RemoteServiceError(f"Sunucuya ulaşılamadı: {type(e).__name__}") from e


class SimplifyClient(EdgeFunctionClient):
    """Client for the ``simplify-text`` function."""

    async def simplify(
            self,
            token: Optional[str] = None,
            json_body: Optional[Dict[str, Any]] = None,
            form_data: Optional[Dict[str, str]] = None,
            files: Optional[List[Tuple[str, Tuple[str, bytes, str]]]] = None,
    ) -> Any:
        """
        Sends either a JSON body (text only) or a multipart form (files).
        POST functions/v1/simplify-text
        """
        if files:
            logger.debug(f"Calling {settings.SIMPLIFY_FUNCTION} with {len(files)} file(s)")
            data = await self.invoke(
                settings.SIMPLIFY_FUNCTION, token=token, data=form_data or {}, files=files
            )
        else:
            logger.debug(f"Calling {settings.SIMPLIFY_FUNCTION} with JSON body")
            data = await self.invoke(settings.SIMPLIFY_FUNCTION, token=token, json=json_body or {})

        # an empty body would otherwise reconcile into an empty legacy result
        if not data:
            logger.error(f"{settings.SIMPLIFY_FUNCTION} returned an empty body")
            raise RemoteServiceError(EMPTY_RESPONSE)
        return data


class DraftClient(EdgeFunctionClient):
    """Client for the ``draft-document`` function."""

    async def draft_document(self, token: Optional[str], payload: Dict[str, Any]) -> Any:
        """POST functions/v1/draft-document"""
        return await self.invoke(settings.DRAFT_FUNCTION, token=token, json=payload)
