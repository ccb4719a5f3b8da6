# artiklo_assistant/__init__.py

from . import config
from .core.orchestrator import AnalysisOrchestrator
from .exceptions import (
    ArtikloError,
    DraftGenerationError,
    FileDecodeError,
    PersistenceError,
    RateLimitExceeded,
    RemoteServiceError,
    SecurityViolation,
    ValidationError,
)

__version__ = "1.0.0"
