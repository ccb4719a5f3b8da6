# test/conftest.py
from typing import Any, Dict, List, Optional

import pytest

from artiklo_assistant.config import Settings
from artiklo_assistant.core.orchestrator import AnalysisOrchestrator
from artiklo_assistant.exceptions import PersistenceError
from artiklo_assistant.services.draft_request_builder import DraftRequestBuilder
from artiklo_assistant.services.persistence_gateway import PersistenceGateway
from artiklo_assistant.services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeSimplifyClient:
    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def simplify(self, token=None, json_body=None, form_data=None, files=None):
        self.calls.append({"token": token, "json_body": json_body, "form_data": form_data, "files": files})
        if self.error:
            raise self.error
        return self.response

    async def close(self):
        pass


class FakeStorageClient:
    def __init__(self, insert_error: Optional[str] = None, credit_error: Optional[str] = None):
        self.insert_error = insert_error
        self.credit_error = credit_error
        self.rows: List[Dict[str, Any]] = []
        self.credit_calls: List[str] = []

    async def insert_document(self, token, row):
        if self.insert_error:
            raise PersistenceError(self.insert_error)
        self.rows.append(row)

    async def decrement_credit(self, token, user_id):
        if self.credit_error:
            raise PersistenceError(self.credit_error)
        self.credit_calls.append(user_id)

    async def close(self):
        pass


class FakeDraftClient:
    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = response if response is not None else {"draftedDocument": "TASLAK METİN"}
        self.error = error
        self.payloads: List[Dict[str, Any]] = []

    async def draft_document(self, token, payload):
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.response

    async def close(self):
        pass


@pytest.fixture
def structured_response() -> Dict[str, Any]:
    return {
        "simplifiedText": "Kiraya veren sözleşmeyi feshetmek istiyor.",
        "documentType": "İhtarname",
        "summary": "Kira sözleşmesinin feshi bildirimi.",
        "actionPlan": "Süre içinde itiraz edin.",
        "extractedEntities": [
            {"entity": "İcra Müdürlüğü", "value": "Ankara 1."},
            {"entity": "Dosya No", "value": "2024/1234"},
        ],
        "actionableSteps": [
            {"description": "Ödeme emrine itiraz edin", "actionType": "CREATE_DOCUMENT", "documentToCreate": "İtiraz Dilekçesi"},
        ],
        "riskItems": [
            {"riskType": "Süre", "description": "7 günlük itiraz süresi", "severity": "high"},
        ],
        "generatedDocument": None,
    }


@pytest.fixture
def legacy_response() -> Dict[str, Any]:
    return {
        "summary": "Eski biçim özet",
        "simplifiedText": "Sade metin",
        "actionPlan": "1. Avukata danışın",
        "entities": [
            {"tip": "Mahkeme", "değer": "İstanbul 3. Asliye Hukuk"},
            {"entity": "Tarih", "value": "01.02.2024"},
            {"değer": "isimsiz değer"},
        ],
    }


@pytest.fixture
def pipeline_settings() -> Settings:
    return Settings(_env_file=None, rate_limit_max_requests=3)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_orchestrator(pipeline_settings, clock):
    def _make(response=None, simplify_error=None, storage=None, draft=None):
        simplify = FakeSimplifyClient(response=response, error=simplify_error)
        storage = storage or FakeStorageClient()
        draft = draft or FakeDraftClient()
        orchestrator = AnalysisOrchestrator(
            rate_limiter=RateLimiter(
                max_requests=pipeline_settings.RATE_LIMIT_MAX_REQUESTS,
                window_seconds=pipeline_settings.RATE_LIMIT_WINDOW_SECONDS,
                clock=clock,
            ),
            simplify_client=simplify,
            persistence=PersistenceGateway(storage_client=storage),
            draft_builder=DraftRequestBuilder(draft_client=draft),
            config=pipeline_settings,
        )
        return orchestrator, simplify, storage, draft

    return _make
