# artiklo_assistant/services/persistence_gateway.py
import logging
from typing import Optional, Sequence

from artiklo_assistant.clients.storage_client import StorageClient
from artiklo_assistant.exceptions import PersistenceError
from artiklo_assistant.models.analysis_models import ReconciledResponse
from artiklo_assistant.models.persistence_models import PersistedDocument, PersistenceReport
from artiklo_assistant.utils.json_encoder import dumps

logger = logging.getLogger(__name__)

NO_SIMPLIFIED_TEXT = "Sadeleştirilmiş metin yok."
SAVE_FAILED = "Belge kaydedilemedi."
CREDIT_FAILED = "Krediniz azaltılamadı ama işlem tamamlandı."


def describe_original_text(text: str, file_names: Sequence[str]) -> str:
    """Value of ``original_text``: prefixed with ``[Files: ...]`` when files were sent."""
    if file_names:
        return f"[Files: {', '.join(file_names)}] {text}"
    return text


def build_action_plan(reconciled: ReconciledResponse) -> str:
    """
    The ``action_plan`` column has no room for the structured shape, so
    structured results are embedded there as a JSON document.
    """
    if not reconciled.is_structured:
        return reconciled.legacy_action_plan

    result = reconciled.result
    return dumps({
        "__structured": True,
        "actionable_steps": result.actionableSteps,
        "extracted_entities": result.extractedEntities,
        "risk_items": result.riskItems,
        "legacy_action_plan": reconciled.legacy_action_plan,
    })


def build_document(reconciled: ReconciledResponse, original_text: str, user_id: str) -> PersistedDocument:
    raw = reconciled.raw
    return PersistedDocument(
        user_id=user_id,
        original_text=original_text,
        simplified_text=str(raw.get("simplifiedText") or NO_SIMPLIFIED_TEXT),
        summary=str(raw.get("summary") or ""),
        action_plan=build_action_plan(reconciled),
        entities=raw.get("entities") or None,
    )


class PersistenceGateway:
    """
    Writes one document row per successful analysis and then takes one credit.

    Failures are logged and returned as warnings; an analysis that already
    succeeded is never reverted.
    """

    def __init__(self, storage_client: Optional[StorageClient] = None):
        self.storage_client = storage_client or StorageClient()

    async def persist(
        self,
        reconciled: ReconciledResponse,
        original_text: str,
        user_id: str,
        token: Optional[str] = None,
    ) -> PersistenceReport:
        report = PersistenceReport()
        document = build_document(reconciled, original_text, user_id)

        logger.info("Saving document to database")
        try:
            await self.storage_client.insert_document(token, document.to_row())
        except PersistenceError as e:
            logger.error(f"Database insert error: {e.message}")
            report.warnings.append(f"{SAVE_FAILED} {e.message}".strip())
            return report

        report.saved = True
        logger.info("Document saved successfully, decrementing credits")

        try:
            await self.storage_client.decrement_credit(token, user_id)
        except PersistenceError as e:
            logger.error(f"Credit decrement error: {e.message}")
            report.warnings.append(CREDIT_FAILED)
            return report

        report.credit_decremented = True
        logger.info("Credits decremented successfully")
        return report
