# artiklo_assistant/models/analysis_models.py
"""
Canonical analysis result.

The simplification service is loosely typed: nulls, numbers and unknown
enum values show up where text is expected. Fields are coerced here rather
than rejected, so one odd item never fails a whole analysis.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SEVERITIES = ("high", "medium", "low")
ACTION_TYPES = ("CREATE_DOCUMENT", "INFO_ONLY")


def as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _items(value: Any) -> Any:
    # null list -> empty; null entries are dropped
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


class ResponseSchema(str, Enum):
    STRUCTURED = "structured"
    LEGACY = "legacy"


class CriticalFact(BaseModel):
    type: str = ""
    value: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("type", "value", mode="before")
    @classmethod
    def _text(cls, value):
        return as_text(value)


class ExtractedEntity(BaseModel):
    entity: str = Field("", description="Entity name, e.g. 'İcra Müdürlüğü'")
    value: Union[str, int, float] = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("entity", mode="before")
    @classmethod
    def _entity_text(cls, value):
        return as_text(value)

    @field_validator("value", mode="before")
    @classmethod
    def _scalar_value(cls, value):
        if value is None:
            return ""
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return str(value)
        return value


class ActionableStep(BaseModel):
    description: str = ""
    actionType: Literal["CREATE_DOCUMENT", "INFO_ONLY"] = "INFO_ONLY"
    documentToCreate: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("description", mode="before")
    @classmethod
    def _text(cls, value):
        return as_text(value)

    @field_validator("actionType", mode="before")
    @classmethod
    def _known_action_type(cls, value):
        normalized = as_text(value).strip().upper()
        return normalized if normalized in ACTION_TYPES else "INFO_ONLY"

    @field_validator("documentToCreate", mode="before")
    @classmethod
    def _optional(cls, value):
        return _optional_text(value)


class RiskItem(BaseModel):
    riskType: str = ""
    description: str = ""
    severity: Literal["high", "medium", "low"] = "medium"
    article: Optional[str] = None
    legalReference: Optional[str] = None
    recommendation: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("riskType", "description", mode="before")
    @classmethod
    def _text(cls, value):
        return as_text(value)

    @field_validator("severity", mode="before")
    @classmethod
    def _known_severity(cls, value):
        normalized = as_text(value).strip().lower()
        return normalized if normalized in SEVERITIES else "medium"

    @field_validator("article", "legalReference", "recommendation", mode="before")
    @classmethod
    def _optional(cls, value):
        return _optional_text(value)


class Party(BaseModel):
    role: str = ""
    details: str = ""

    @field_validator("role", "details", mode="before")
    @classmethod
    def _text(cls, value):
        return as_text(value)


class GeneratedDocument(BaseModel):
    """Draft skeleton the simplification service may attach to a structured result."""

    addressee: str = ""
    caseReference: str = ""
    parties: List[Party] = Field(default_factory=list)
    subject: str = ""
    explanations: List[str] = Field(default_factory=list)
    legalGrounds: str = ""
    conclusionAndRequest: str = ""
    attachments: Optional[List[str]] = None
    signatureBlock: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator(
        "addressee", "caseReference", "subject", "legalGrounds", "conclusionAndRequest", "signatureBlock",
        mode="before",
    )
    @classmethod
    def _text(cls, value):
        return as_text(value)

    @field_validator("parties", mode="before")
    @classmethod
    def _parties(cls, value):
        return _items(value)

    @field_validator("explanations", mode="before")
    @classmethod
    def _explanations(cls, value):
        items = _items(value)
        return [str(item) for item in items] if isinstance(items, list) else items

    @field_validator("attachments", mode="before")
    @classmethod
    def _attachments(cls, value):
        if value is None:
            return None
        items = _items(value)
        return [str(item) for item in items] if isinstance(items, list) else items


class AnalysisResult(BaseModel):
    """Canonical analysis result every service response is reconciled into."""

    simplifiedText: str = ""
    documentType: str = ""
    summary: str = ""
    criticalFacts: List[CriticalFact] = Field(default_factory=list)
    extractedEntities: List[ExtractedEntity] = Field(default_factory=list)
    actionableSteps: List[ActionableStep] = Field(default_factory=list)
    riskItems: List[RiskItem] = Field(default_factory=list)
    generatedDocument: Optional[GeneratedDocument] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("simplifiedText", "documentType", "summary", mode="before")
    @classmethod
    def _text(cls, value):
        return as_text(value)

    @field_validator("criticalFacts", "extractedEntities", "actionableSteps", "riskItems", mode="before")
    @classmethod
    def _lists(cls, value):
        return _items(value)


class ReconciledResponse(BaseModel):
    """
    Tagged result of reconciliation.

    ``raw`` keeps the service payload because persistence stores a few legacy
    columns (``actionPlan``, ``entities``) that have no canonical counterpart.
    """

    schema_: ResponseSchema = Field(..., alias="schema")
    result: AnalysisResult
    legacy_action_plan: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_structured(self) -> bool:
        return self.schema_ == ResponseSchema.STRUCTURED
