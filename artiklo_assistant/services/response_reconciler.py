# artiklo_assistant/services/response_reconciler.py
"""
Maps both simplification response schemas into one ``AnalysisResult``.

The service changed its contract over time and both shapes stay supported:

- structured: carries ``simplifiedText``, ``documentType``,
  ``extractedEntities`` and ``actionableSteps``;
- legacy: anything else, typically ``{summary, simplifiedText, actionPlan,
  entities: [{tip, değer}]}``.
"""
import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError as PydanticValidationError

from artiklo_assistant.exceptions import RemoteServiceError
from artiklo_assistant.models.analysis_models import (
    AnalysisResult,
    ExtractedEntity,
    ReconciledResponse,
    ResponseSchema,
    as_text,
)

logger = logging.getLogger(__name__)

STRUCTURED_FIELDS = ("simplifiedText", "documentType", "extractedEntities", "actionableSteps")
UNKNOWN = "Bilinmeyen"


def _present(raw: Mapping[str, Any], field: str) -> bool:
    # Empty lists count as present, empty strings do not
    value = raw.get(field)
    return value is not None and value != ""


def classify_response(raw: Mapping[str, Any]) -> ResponseSchema:
    if all(_present(raw, field) for field in STRUCTURED_FIELDS):
        return ResponseSchema.STRUCTURED
    return ResponseSchema.LEGACY


def convert_legacy_entities(entities: Any) -> List[ExtractedEntity]:
    """One canonical entry per legacy entry; nothing is dropped."""
    if not isinstance(entities, list):
        return []

    converted = []
    for item in entities:
        if isinstance(item, Mapping):
            name = item.get("tip") or item.get("entity") or UNKNOWN
            value = item.get("değer") or item.get("value") or ""
        else:
            name, value = UNKNOWN, as_text(item)
        if not isinstance(value, (str, int, float)):
            value = str(value)
        converted.append(ExtractedEntity(entity=str(name), value=value))
    return converted


def _as_objects(items: Any, wrap) -> Any:
    # bare strings or numbers from the service are wrapped, not rejected
    if not isinstance(items, list):
        return items
    return [item if isinstance(item, Mapping) else wrap(item) for item in items if item is not None]


def _reconcile_structured(raw: Dict[str, Any]) -> AnalysisResult:
    data = dict(raw)
    data["riskItems"] = data.get("riskItems") or []
    data["criticalFacts"] = data.get("criticalFacts") or []
    data["extractedEntities"] = _as_objects(
        data.get("extractedEntities"), lambda item: {"entity": UNKNOWN, "value": as_text(item)}
    )
    data["actionableSteps"] = _as_objects(
        data.get("actionableSteps"), lambda item: {"description": as_text(item)}
    )
    if not isinstance(data.get("generatedDocument"), Mapping):
        data["generatedDocument"] = None
    try:
        return AnalysisResult.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"Structured response failed validation: {e.error_count()} errors")
        raise RemoteServiceError("Sunucudan geçersiz yanıt alındı.") from e


def _reconcile_legacy(raw: Dict[str, Any]) -> AnalysisResult:
    return AnalysisResult(
        simplifiedText=as_text(raw.get("simplifiedText")),
        documentType=as_text(raw.get("documentType")) or UNKNOWN,
        summary=as_text(raw.get("summary")),
        extractedEntities=convert_legacy_entities(raw.get("entities")),
        actionableSteps=[],
        generatedDocument=None,
    )


def reconcile(raw: Any) -> ReconciledResponse:
    if not isinstance(raw, dict):
        logger.error(f"Unexpected response payload type: {type(raw).__name__}")
        raise RemoteServiceError("Sunucudan geçersiz yanıt alındı.")

    schema = classify_response(raw)
    if schema == ResponseSchema.STRUCTURED:
        logger.info("Using structured response")
        result = _reconcile_structured(raw)
    else:
        logger.info("Using legacy response format")
        result = _reconcile_legacy(raw)

    return ReconciledResponse(
        schema=schema,
        result=result,
        legacy_action_plan=as_text(raw.get("actionPlan")),
        raw=raw,
    )


class ResponseReconciler:
    def reconcile(self, raw: Any) -> ReconciledResponse:
        return reconcile(raw)
