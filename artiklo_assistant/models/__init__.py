# artiklo_assistant/models/__init__.py
from .analysis_models import (
    ActionableStep,
    AnalysisResult,
    CriticalFact,
    ExtractedEntity,
    GeneratedDocument,
    ReconciledResponse,
    ResponseSchema,
    RiskItem,
)
from .draft_models import AnalysisLite, DraftRequest, ItirazNedeni, Kisi, KullaniciGirdileri
from .orchestrator_models import (
    AnalysisFailed,
    AnalysisOutcome,
    AnalysisSucceeded,
    ErrorKind,
    PipelineState,
)
from .persistence_models import PersistedDocument, PersistenceReport
from .request_models import AnalysisRequest, Base64File, BinaryFile, FileHandle, TransportFile
