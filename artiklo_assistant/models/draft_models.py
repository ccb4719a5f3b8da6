# artiklo_assistant/models/draft_models.py
from typing import List, Optional

from pydantic import BaseModel, Field

from artiklo_assistant.models.analysis_models import (
    ActionableStep,
    CriticalFact,
    ExtractedEntity,
    RiskItem,
)


class Kisi(BaseModel):
    ad_soyad: str = "[Ad Soyad]"
    tc_kimlik: Optional[str] = None
    adres: Optional[str] = None


class ItirazNedeni(BaseModel):
    tip: str
    aciklama: str


class KullaniciGirdileri(BaseModel):
    makam_adi: str
    dosya_no: Optional[str] = None
    itiraz_eden_kisi: Kisi = Field(default_factory=Kisi)
    itiraz_nedenleri: List[ItirazNedeni] = Field(default_factory=list)
    talep_sonucu: str = ""
    ekler: List[str] = Field(default_factory=list)


class AnalysisLite(BaseModel):
    """Subset of the analysis result forwarded to the drafting service."""

    summary: Optional[str] = None
    simplifiedText: Optional[str] = None
    documentType: Optional[str] = None
    criticalFacts: List[CriticalFact] = Field(default_factory=list)
    extractedEntities: List[ExtractedEntity] = Field(default_factory=list)
    actionableSteps: List[ActionableStep] = Field(default_factory=list)
    riskItems: List[RiskItem] = Field(default_factory=list)
    originalText: Optional[str] = None


class DraftRequest(BaseModel):
    belge_turu: str = "Dilekçe"
    kullanici_girdileri: KullaniciGirdileri
    analysis: Optional[AnalysisLite] = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
