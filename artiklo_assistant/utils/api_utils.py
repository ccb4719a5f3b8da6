# artiklo_assistant/utils/api_utils.py
import json
import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)


def prepare_auth_headers(token: Optional[str], api_key: str, json_body: bool = True) -> Dict[str, str]:
    """Creates the standard Supabase headers. Falls back to the anon key without a user token."""
    headers = {
        "apikey": api_key,
        "Authorization": f"Bearer {token or api_key}",
    }
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers


def extract_error_message(response: httpx.Response) -> str:
    try:
        details = response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text[:200] or response.reason_phrase

    if isinstance(details, dict):
        for key in ("error", "message", "msg", "detail"):
            if details.get(key):
                return str(details[key])
    return str(details)[:200]


async def handle_api_error(response: httpx.Response, request_info: str):
    """
    Checks the response status and raises ``httpx.HTTPStatusError`` for >= 400.
    Logs the error details.
    """
    if response.is_error:
        logger.error(
            f"API Error [{response.status_code}] for {request_info}. "
            f"Details: {extract_error_message(response)}"
        )
        response.raise_for_status()
