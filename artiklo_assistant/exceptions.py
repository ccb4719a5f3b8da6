# artiklo_assistant/exceptions.py
"""
Error taxonomy of the analysis pipeline.

Every error carries an ``ErrorKind`` and a message that is safe to show to the
end user as-is. ``SecurityViolation``, ``ValidationError``,
``RateLimitExceeded`` and ``FileDecodeError`` are raised before any network
call. ``PersistenceError`` is never fatal to an analysis.
"""
from typing import Dict, List, Optional

from artiklo_assistant.models.orchestrator_models import ErrorKind


class ArtikloError(Exception):
    """Base class for all pipeline errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    default_message = "Bir hata oluştu. Lütfen tekrar deneyin."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SecurityViolation(ArtikloError):
    kind = ErrorKind.SECURITY_VIOLATION
    default_message = "Geçersiz girdi tespit edildi"


class ValidationError(ArtikloError):
    """Schema or shape violation. ``fields`` maps field path to message."""

    kind = ErrorKind.VALIDATION_ERROR
    default_message = "Lütfen giriş bilgilerinizi kontrol edin."

    def __init__(self, message: Optional[str] = None, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields: Dict[str, str] = dict(fields or {})


class RateLimitExceeded(ArtikloError):
    kind = ErrorKind.RATE_LIMIT_EXCEEDED
    default_message = "Çok fazla istek gönderdiniz. Lütfen 15 dakika bekleyin."

    def __init__(self, message: Optional[str] = None, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after


class FileDecodeError(ArtikloError):
    """A captured (base64) file could not be decoded. ``failures`` is per file."""

    kind = ErrorKind.FILE_DECODE_ERROR
    default_message = "Dosya verisi boş veya eksik"

    def __init__(self, message: Optional[str] = None, failures: Optional[Dict[str, str]] = None):
        self.failures: Dict[str, str] = dict(failures or {})
        if message is None and self.failures:
            details = "; ".join(f"{name}: {reason}" for name, reason in self.failures.items())
            message = f"Dosya işlenirken hata oluştu: {details}"
        super().__init__(message)

    @property
    def file_names(self) -> List[str]:
        return list(self.failures)


class RemoteServiceError(ArtikloError):
    kind = ErrorKind.REMOTE_SERVICE_ERROR
    default_message = "API fonksiyon hatası"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceError(ArtikloError):
    kind = ErrorKind.PERSISTENCE_ERROR
    default_message = "Belge kaydedilemedi."


class DraftGenerationError(ArtikloError):
    kind = ErrorKind.DRAFT_GENERATION_ERROR
    default_message = "Taslak üretilemedi."
