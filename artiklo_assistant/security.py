# artiklo_assistant/security.py
"""
Input security for the analysis pipeline.

The scan runs on the raw text before sanitization, so a rejected payload is
never silently cleaned and resubmitted. Schema validation runs on the
sanitized text together with the file list.
"""
import base64
import json
import logging
import re
import unicodedata
from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, Optional, Sequence

from artiklo_assistant.config import Settings, settings as default_settings
from artiklo_assistant.exceptions import SecurityViolation, ValidationError
from artiklo_assistant.models.request_models import FileHandle

logger = logging.getLogger(__name__)

UNSAFE_PATTERNS = [
    (re.compile(r"<\s*script\b", re.IGNORECASE), "script etiketi"),
    (re.compile(r"<\s*iframe\b", re.IGNORECASE), "iframe etiketi"),
    (re.compile(r"<\s*object\b", re.IGNORECASE), "object etiketi"),
    (re.compile(r"<\s*embed\b", re.IGNORECASE), "embed etiketi"),
    (re.compile(r"\b(?:javascript|vbscript)\s*:", re.IGNORECASE), "script bağlantısı"),
    (re.compile(r"data\s*:\s*text/html", re.IGNORECASE), "gömülü HTML"),
    (re.compile(r"<[^>]*\son\w+\s*=", re.IGNORECASE), "olay işleyicisi"),
]

# C0 controls except \t \n \r, plus DEL
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

DANGEROUS_TYPES = {
    "application/x-executable",
    "application/x-msdownload",
    "application/x-msi",
    "application/x-msdos-program",
}

SUSPICIOUS_SUFFIXES = (".exe", ".bat", ".cmd", ".com", ".scr", ".pif", ".vbs", ".js")


@dataclass(frozen=True)
class ValidationOutcome:
    ok: bool
    sanitized_text: str = ""
    reason: Optional[str] = None
    fields: Optional[Dict[str, str]] = None


class SecurityValidator:
    """Scans, sanitizes and schema-checks one analysis request."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def scan(self, raw_text: Optional[str]) -> None:
        """Raises ``SecurityViolation`` on the first unsafe construct found."""
        if not raw_text:
            return

        if CONTROL_CHARS.search(raw_text):
            logger.warning("Security scan rejected input: control characters")
            raise SecurityViolation("Metin geçersiz kontrol karakterleri içeriyor.")

        for pattern, label in UNSAFE_PATTERNS:
            if pattern.search(raw_text):
                logger.warning(f"Security scan rejected input: {label}")
                raise SecurityViolation(f"Güvenlik nedeniyle reddedildi: {label} tespit edildi.")

    @staticmethod
    def sanitize(raw_text: Optional[str]) -> str:
        """NFC, LF line endings, trimmed. Content is never removed; unsafe input is rejected by ``scan``."""
        text = raw_text or ""
        text = unicodedata.normalize("NFC", text).replace("\r\n", "\n").replace("\r", "\n")
        return text.strip()

    def _file_errors(self, index: int, file: FileHandle) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        prefix = f"files[{index}]"
        name = (file.name or "").strip()
        file_type = (file.type or "").lower()

        if not name:
            errors[f"{prefix}.name"] = "Dosya adı gereklidir"
        else:
            lowered = name.lower()
            if lowered.endswith(SUSPICIOUS_SUFFIXES):
                errors[f"{prefix}.name"] = "Güvenlik nedeniyle bu dosya türü desteklenmiyor"
            elif PurePath(lowered).suffix not in self.config.ALLOWED_FILE_EXTENSIONS:
                errors[f"{prefix}.name"] = "Desteklenmeyen dosya uzantısı"

        if file_type in DANGEROUS_TYPES:
            errors[f"{prefix}.type"] = "Güvenlik nedeniyle bu dosya türü desteklenmiyor"
        elif file_type not in self.config.ALLOWED_FILE_TYPES:
            errors[f"{prefix}.type"] = "Desteklenmeyen dosya türü"

        if file.size > self.config.MAX_FILE_SIZE_BYTES:
            limit_mb = self.config.MAX_FILE_SIZE_BYTES // (1024 * 1024)
            errors[f"{prefix}.size"] = f"Dosya boyutu {limit_mb}MB'dan büyük olamaz"

        return errors

    def validate_request(self, sanitized_text: str, files: Sequence[FileHandle]) -> None:
        """
        Schema validation of the combined ``{text, files}``.

        Raises:
            ValidationError: with every violated field in ``fields``.
        """
        errors: Dict[str, str] = {}

        if not sanitized_text.strip() and not files:
            raise ValidationError(
                "Lütfen sadeleştirmek için bir metin girin veya dosya yükleyin.",
                fields={"text": "Metin gereklidir", "files": "Dosya gereklidir"},
            )

        if len(sanitized_text) > self.config.MAX_TEXT_LENGTH:
            errors["text"] = f"Metin çok uzun (maksimum {self.config.MAX_TEXT_LENGTH:,} karakter)"

        if len(files) > self.config.MAX_FILES:
            errors["files"] = f"En fazla {self.config.MAX_FILES} dosya yüklenebilir"

        for index, file in enumerate(files):
            errors.update(self._file_errors(index, file))

        if errors:
            logger.warning(f"Validation failed, errorCount={len(errors)}")
            raise ValidationError(fields=errors)

    def check(self, raw_text: Optional[str], files: Sequence[FileHandle] = ()) -> str:
        """Scan, sanitize, validate. Returns the sanitized text or raises."""
        self.scan(raw_text)
        sanitized = self.sanitize(raw_text)
        self.validate_request(sanitized, files)
        return sanitized

    def validate(self, raw_text: Optional[str], files: Sequence[FileHandle] = ()) -> ValidationOutcome:
        try:
            sanitized = self.check(raw_text, files)
        except SecurityViolation as e:
            return ValidationOutcome(ok=False, reason=e.message)
        except ValidationError as e:
            return ValidationOutcome(ok=False, reason=e.message, fields=e.fields)
        return ValidationOutcome(ok=True, sanitized_text=sanitized)


def extract_user_id_from_token(user_token: str) -> str:
    """
    Decodes the JWT payload to get the user id ('sub' or 'id').

    NOTE: this is *not* JWT validation. Signature and expiry are checked by
    the storage collaborator that receives the same token.
    """
    try:
        parts = user_token.split(".")
        if len(parts) != 3:
            raise ValueError("Invalid JWT format: expected Header.Payload.Signature.")

        _, payload_encoded, _ = parts

        padding_needed = 4 - (len(payload_encoded) % 4)
        if padding_needed < 4:
            payload_encoded += "=" * padding_needed

        payload_decoded = base64.urlsafe_b64decode(payload_encoded.encode("utf-8"))
        payload: dict = json.loads(payload_decoded)

        user_id = payload.get("sub") or payload.get("id")
        if not user_id:
            raise ValueError("User ID ('sub' or 'id') not found in JWT payload.")

        return str(user_id)

    except (ValueError, IndexError, json.JSONDecodeError) as e:
        logger.error(f"JWT decode error: {e}")
        raise ValueError(f"Token decode error: {e}")


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()
