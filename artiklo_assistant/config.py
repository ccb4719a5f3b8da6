# artiklo_assistant/config.py
import os
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    supabase_url: str = "http://127.0.0.1:54321"
    supabase_anon_key: str = "anon-key-placeholder"
    simplify_function: str = "simplify-text"
    draft_function: str = "draft-document"
    documents_table: str = "documents"
    credit_rpc: str = "decrement_credit"
    service_timeout: Optional[float] = 120.0

    rate_limit_max_requests: int = 5
    rate_limit_window_seconds: int = 15 * 60

    max_text_length: int = 10_000
    max_files: int = 10
    max_file_size_bytes: int = 10 * 1024 * 1024
    allowed_file_types: List[str] = [
        "text/plain",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "image/jpeg",
        "image/png",
        "image/gif",
    ]
    allowed_file_extensions: List[str] = [
        ".txt", ".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png", ".gif",
    ]

    ENVIRONMENT: str = "development"

    api_port: int = 8000
    debug: bool = True
    logging_level: str = "INFO"
    logging_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    class Config:
        env_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env")

    @property
    def SUPABASE_URL(self) -> str:
        return self.supabase_url.rstrip("/")

    @property
    def SUPABASE_ANON_KEY(self) -> str:
        return self.supabase_anon_key

    @property
    def SIMPLIFY_FUNCTION(self) -> str:
        return self.simplify_function

    @property
    def DRAFT_FUNCTION(self) -> str:
        return self.draft_function

    @property
    def DOCUMENTS_TABLE(self) -> str:
        return self.documents_table

    @property
    def CREDIT_RPC(self) -> str:
        return self.credit_rpc

    @property
    def SERVICE_TIMEOUT(self) -> Optional[float]:
        return self.service_timeout

    @property
    def RATE_LIMIT_MAX_REQUESTS(self) -> int:
        return self.rate_limit_max_requests

    @property
    def RATE_LIMIT_WINDOW_SECONDS(self) -> int:
        return self.rate_limit_window_seconds

    @property
    def MAX_TEXT_LENGTH(self) -> int:
        return self.max_text_length

    @property
    def MAX_FILES(self) -> int:
        return self.max_files

    @property
    def MAX_FILE_SIZE_BYTES(self) -> int:
        return self.max_file_size_bytes

    @property
    def ALLOWED_FILE_TYPES(self) -> List[str]:
        return self.allowed_file_types

    @property
    def ALLOWED_FILE_EXTENSIONS(self) -> List[str]:
        return self.allowed_file_extensions

    @property
    def API_PORT(self) -> int:
        return self.api_port

    @property
    def DEBUG(self) -> bool:
        return self.debug

    @property
    def LOGGING_LEVEL(self) -> str:
        return self.logging_level

    @property
    def LOGGING_FORMAT(self) -> str:
        return self.logging_format


settings = Settings()
