# artiklo_assistant/models/orchestrator_models.py
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from artiklo_assistant.models.analysis_models import AnalysisResult, ResponseSchema


class PipelineState(str, Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    RATE_CHECKED = "RateChecked"
    NORMALIZING = "Normalizing"
    INVOKING = "Invoking"
    RECONCILING = "Reconciling"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ErrorKind(str, Enum):
    SECURITY_VIOLATION = "security_violation"
    VALIDATION_ERROR = "validation_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    FILE_DECODE_ERROR = "file_decode_error"
    REMOTE_SERVICE_ERROR = "remote_service_error"
    PERSISTENCE_ERROR = "persistence_error"
    DRAFT_GENERATION_ERROR = "draft_generation_error"
    INTERNAL_ERROR = "internal_error"


class AnalysisSucceeded(BaseModel):
    status: Literal["ok"] = "ok"
    result: AnalysisResult
    schema_: ResponseSchema = Field(..., alias="schema")
    persisted: bool = False
    credit_decremented: bool = False
    warnings: List[str] = Field(default_factory=list)
    states: List[PipelineState] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class AnalysisFailed(BaseModel):
    status: Literal["error"] = "error"
    kind: ErrorKind
    message: str
    fields: Dict[str, str] = Field(default_factory=dict)
    retry_after: Optional[float] = None
    states: List[PipelineState] = Field(default_factory=list)


AnalysisOutcome = Annotated[
    Union[AnalysisSucceeded, AnalysisFailed], Field(discriminator="status")
]
