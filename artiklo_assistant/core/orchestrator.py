# artiklo_assistant/core/orchestrator.py
"""
Analysis pipeline.

    Idle -> Validating -> RateChecked -> [Normalizing] -> Invoking
         -> Reconciling -> Succeeded | Failed

Every step waits for the previous one. Exactly one simplification call is
made per admitted request and nothing is retried. The outcome is returned as
a discriminated result instead of being pushed to callbacks, so the caller
decides how to present it.
"""
import logging
import re
from typing import List, Optional

from artiklo_assistant.clients.function_client import SimplifyClient
from artiklo_assistant.config import Settings, settings as default_settings
from artiklo_assistant.exceptions import (
    ArtikloError,
    FileDecodeError,
    RateLimitExceeded,
    RemoteServiceError,
    SecurityViolation,
    ValidationError,
)
from artiklo_assistant.models.analysis_models import AnalysisResult, ReconciledResponse
from artiklo_assistant.models.orchestrator_models import (
    AnalysisFailed,
    AnalysisOutcome,
    AnalysisSucceeded,
    PipelineState,
)
from artiklo_assistant.models.persistence_models import PersistenceReport
from artiklo_assistant.models.request_models import AnalysisRequest
from artiklo_assistant.security import SecurityValidator
from artiklo_assistant.services.draft_request_builder import DraftRequestBuilder
from artiklo_assistant.services.input_normalizer import InputNormalizer
from artiklo_assistant.services.persistence_gateway import PersistenceGateway, describe_original_text
from artiklo_assistant.services.rate_limiter import ANONYMOUS, RateLimiter
from artiklo_assistant.services.response_reconciler import ResponseReconciler

logger = logging.getLogger(__name__)

LOOPBACK_HOST = re.compile(r"^(localhost|127\.0\.0\.1)")


def is_loopback_host(host: Optional[str]) -> bool:
    return bool(host) and bool(LOOPBACK_HOST.match(host))


def _cooldown_message(retry_after: float) -> str:
    minutes = max(1, int(round(retry_after / 60))) if retry_after else 15
    return f"Çok fazla istek gönderdiniz. Lütfen {minutes} dakika bekleyin."


class AnalysisOrchestrator:
    def __init__(
        self,
        validator: Optional[SecurityValidator] = None,
        rate_limiter: Optional[RateLimiter] = None,
        normalizer: Optional[InputNormalizer] = None,
        simplify_client: Optional[SimplifyClient] = None,
        reconciler: Optional[ResponseReconciler] = None,
        persistence: Optional[PersistenceGateway] = None,
        draft_builder: Optional[DraftRequestBuilder] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.validator = validator or SecurityValidator(self.config)
        self.rate_limiter = rate_limiter or RateLimiter(
            max_requests=self.config.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=self.config.RATE_LIMIT_WINDOW_SECONDS,
        )
        self.normalizer = normalizer or InputNormalizer()
        self.simplify_client = simplify_client or SimplifyClient()
        self.reconciler = reconciler or ResponseReconciler()
        self.persistence = persistence or PersistenceGateway()
        self.draft_builder = draft_builder or DraftRequestBuilder()

    async def close(self):
        """Closes the HTTP clients owned by the pipeline."""
        for client in (
            self.simplify_client,
            getattr(self.persistence, "storage_client", None),
            getattr(self.draft_builder, "draft_client", None),
        ):
            if client is not None and hasattr(client, "close"):
                await client.close()

    async def analyze(
        self,
        request: AnalysisRequest,
        user_id: Optional[str] = None,
        token: Optional[str] = None,
        origin_host: Optional[str] = None,
    ) -> AnalysisOutcome:
        states: List[PipelineState] = [PipelineState.IDLE, PipelineState.VALIDATING]
        identifier = user_id or ANONYMOUS
        logger.info(f"Starting document analysis (model={request.model}, files={len(request.files)})")

        try:
            sanitized_text = self.validator.check(request.text, request.files)

            allowed = self.rate_limiter.is_allowed(identifier)
            states.append(PipelineState.RATE_CHECKED)
            if not allowed:
                retry_after = self.rate_limiter.retry_after(identifier)
                raise RateLimitExceeded(_cooldown_message(retry_after), retry_after=retry_after)

            if request.files:
                states.append(PipelineState.NORMALIZING)
                multipart_files = self.normalizer.normalize(request.files)
                form_data = {"model": request.model}
                if sanitized_text.strip():
                    form_data["text"] = sanitized_text
                states.append(PipelineState.INVOKING)
                raw = await self.simplify_client.simplify(token, form_data=form_data, files=multipart_files)
            else:
                json_body = {"text": sanitized_text, "model": request.model}
                if request.noCache or is_loopback_host(origin_host):
                    json_body["noCache"] = True
                states.append(PipelineState.INVOKING)
                raw = await self.simplify_client.simplify(token, json_body=json_body)

            states.append(PipelineState.RECONCILING)
            reconciled = self.reconciler.reconcile(raw)

        except (SecurityViolation, ValidationError, RateLimitExceeded, FileDecodeError, RemoteServiceError) as e:
            states.append(PipelineState.FAILED)
            return self._failed(e, states)

        states.append(PipelineState.SUCCEEDED)
        logger.info(f"Analysis succeeded ({reconciled.schema_.value} response)")

        report = PersistenceReport()
        if user_id:
            original_text = describe_original_text(sanitized_text, request.file_names)
            report = await self.persistence.persist(reconciled, original_text, user_id, token=token)

        return self._succeeded(reconciled, report, states)

    @staticmethod
    def _failed(error: ArtikloError, states: List[PipelineState]) -> AnalysisFailed:
        logger.warning(f"Analysis failed [{error.kind.value}]: {error.message}")
        return AnalysisFailed(
            kind=error.kind,
            message=error.message,
            fields=getattr(error, "fields", None) or getattr(error, "failures", None) or {},
            retry_after=getattr(error, "retry_after", None),
            states=states,
        )

    @staticmethod
    def _succeeded(
        reconciled: ReconciledResponse,
        report: PersistenceReport,
        states: List[PipelineState],
    ) -> AnalysisSucceeded:
        return AnalysisSucceeded(
            result=reconciled.result,
            schema=reconciled.schema_,
            persisted=report.saved,
            credit_decremented=report.credit_decremented,
            warnings=report.warnings,
            states=states,
        )

    async def create_draft(
        self,
        result: Optional[AnalysisResult],
        original_text: str,
        token: Optional[str] = None,
    ) -> str:
        """Raises ``DraftGenerationError``; a prior analysis result stays valid."""
        return await self.draft_builder.create_draft(result, original_text, token=token)
