# artiklo_assistant/services/draft_request_builder.py
"""
Builds the drafting-service request from an analysis result.

Two paths:
- the simplification service already returned a ``generatedDocument``
  skeleton: reuse its addressee, case reference, explanations and relief;
- no skeleton: pick addressee and case reference from the extracted
  entities and turn risk items into objection grounds.
"""
import logging
import re
from typing import Optional

from artiklo_assistant.clients.function_client import DraftClient
from artiklo_assistant.exceptions import ArtikloError, DraftGenerationError
from artiklo_assistant.models.analysis_models import AnalysisResult, GeneratedDocument
from artiklo_assistant.models.draft_models import (
    AnalysisLite,
    DraftRequest,
    ItirazNedeni,
    Kisi,
    KullaniciGirdileri,
)
from artiklo_assistant.services.entity_classifier import EntityRole, find_first

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TYPE = "Dilekçe"
DEFAULT_ADDRESSEE = "[Yetkili Makam]"
DEFAULT_RELIEF = "Talebimizin kabulü"
MAX_SKELETON_REASONS = 5
MAX_SYNTHESIZED_REASONS = 7

# Dative suffix: "İCRA MÜDÜRLÜĞÜ'NE", "ASLİYE HUKUK MAHKEMESİNE"
ADDRESSEE_SUFFIX = re.compile(r"(?:['’]NE|\s*NE)$", re.IGNORECASE)
CASE_LABEL = re.compile(r"^(?:ESAS NO:|DOSYA NO:|TAKİP NO:)\s*", re.IGNORECASE)


def clean_addressee(addressee: Optional[str]) -> str:
    cleaned = ADDRESSEE_SUFFIX.sub("", (addressee or "").strip()).strip()
    return cleaned or DEFAULT_ADDRESSEE


def clean_case_reference(case_reference: Optional[str]) -> Optional[str]:
    cleaned = CASE_LABEL.sub("", (case_reference or "").strip()).strip()
    return cleaned or None


def _analysis_subset(result: AnalysisResult, original_text: str) -> AnalysisLite:
    return AnalysisLite(
        summary=result.summary,
        simplifiedText=result.simplifiedText,
        documentType=result.documentType,
        criticalFacts=result.criticalFacts,
        extractedEntities=result.extractedEntities,
        actionableSteps=result.actionableSteps,
        riskItems=result.riskItems,
        originalText=original_text,
    )


def _from_skeleton(document: GeneratedDocument) -> KullaniciGirdileri:
    reasons = [
        ItirazNedeni(tip=f"Gerekçe {i + 1}", aciklama=text)
        for i, text in enumerate(document.explanations[:MAX_SKELETON_REASONS])
    ]
    return KullaniciGirdileri(
        makam_adi=clean_addressee(document.addressee),
        dosya_no=clean_case_reference(document.caseReference),
        itiraz_eden_kisi=Kisi(),
        itiraz_nedenleri=reasons,
        talep_sonucu=document.conclusionAndRequest,
        ekler=list(document.attachments or []),
    )


def _synthesized(result: AnalysisResult) -> KullaniciGirdileri:
    addressee = find_first(result.extractedEntities, EntityRole.ADDRESSEE)
    case_ref = find_first(result.extractedEntities, EntityRole.CASE_REF)

    reasons = [
        ItirazNedeni(tip=f"{risk.riskType or 'Gerekçe'} {i + 1}", aciklama=risk.description)
        for i, risk in enumerate(result.riskItems[:MAX_SYNTHESIZED_REASONS])
    ]
    relief = result.actionableSteps[0].description if result.actionableSteps else ""

    return KullaniciGirdileri(
        makam_adi=str(addressee.value) if addressee and addressee.value != "" else DEFAULT_ADDRESSEE,
        dosya_no=str(case_ref.value) if case_ref and case_ref.value != "" else None,
        itiraz_eden_kisi=Kisi(),
        itiraz_nedenleri=reasons,
        talep_sonucu=relief or DEFAULT_RELIEF,
        ekler=[],
    )


def build_draft_request(result: AnalysisResult, original_text: str) -> DraftRequest:
    if result.generatedDocument is not None:
        logger.info("Building draft request from service-provided skeleton")
        inputs = _from_skeleton(result.generatedDocument)
    else:
        logger.info("Synthesizing draft request from extracted entities")
        inputs = _synthesized(result)

    return DraftRequest(
        belge_turu=result.documentType or DEFAULT_DOCUMENT_TYPE,
        kullanici_girdileri=inputs,
        analysis=_analysis_subset(result, original_text),
    )


class DraftRequestBuilder:
    def __init__(self, draft_client: Optional[DraftClient] = None):
        self.draft_client = draft_client or DraftClient()

    def build(self, result: AnalysisResult, original_text: str) -> DraftRequest:
        return build_draft_request(result, original_text)

    async def create_draft(
        self,
        result: Optional[AnalysisResult],
        original_text: str,
        token: Optional[str] = None,
    ) -> str:
        """
        Returns the drafted document text.

        Raises:
            DraftGenerationError: no result, remote failure, or no
                ``draftedDocument`` in the response. The analysis result
                itself is untouched and the draft can be requested again.
        """
        if result is None:
            raise DraftGenerationError("Analiz sonucu bulunamadı")

        payload = self.build(result, original_text).to_payload()

        try:
            data = await self.draft_client.draft_document(token, payload)
        except ArtikloError as e:
            logger.error(f"Draft creation error: {e.message}")
            raise DraftGenerationError(e.message) from e

        drafted = data.get("draftedDocument") if isinstance(data, dict) else None
        if drafted is None or drafted == "":
            logger.error("Draft service returned no document")
            raise DraftGenerationError()

        return str(drafted)
