# test/test_orchestrator_scenarios.py
import base64
import json

import httpx
import pytest

from artiklo_assistant.clients.function_client import SimplifyClient
from artiklo_assistant.exceptions import DraftGenerationError, RemoteServiceError
from artiklo_assistant.models.analysis_models import AnalysisResult, ResponseSchema
from artiklo_assistant.models.orchestrator_models import (
    AnalysisFailed,
    AnalysisSucceeded,
    ErrorKind,
    PipelineState,
)
from artiklo_assistant.models.request_models import AnalysisRequest, Base64File, BinaryFile
from conftest import FakeStorageClient

S = PipelineState


@pytest.mark.asyncio
async def test_text_only_analysis_end_to_end(make_orchestrator, structured_response):
    """
    Test: authenticated text-only request, structured response.
    Expected: one JSON call, Succeeded, one row saved with a tagged action plan.
    """
    orchestrator, simplify, storage, _ = make_orchestrator(response=structured_response)

    outcome = await orchestrator.analyze(
        AnalysisRequest(text="  Kira sözleşmesi feshi  ", model="pro"),
        user_id="user-1",
        token="jwt",
    )

    assert isinstance(outcome, AnalysisSucceeded)
    assert outcome.schema_ == ResponseSchema.STRUCTURED
    assert outcome.result.documentType == "İhtarname"
    assert outcome.persisted and outcome.credit_decremented
    assert outcome.states == [S.IDLE, S.VALIDATING, S.RATE_CHECKED, S.INVOKING, S.RECONCILING, S.SUCCEEDED]

    [call] = simplify.calls
    assert call["json_body"] == {"text": "Kira sözleşmesi feshi", "model": "pro"}
    assert call["files"] is None
    assert call["token"] == "jwt"

    [row] = storage.rows
    assert row["original_text"] == "Kira sözleşmesi feshi"
    assert json.loads(row["action_plan"])["__structured"] is True
    assert storage.credit_calls == ["user-1"]


@pytest.mark.asyncio
async def test_empty_request_rejected_without_calls(make_orchestrator, structured_response):
    orchestrator, simplify, storage, _ = make_orchestrator(response=structured_response)

    outcome = await orchestrator.analyze(AnalysisRequest(text="   "), user_id="user-1")

    assert isinstance(outcome, AnalysisFailed)
    assert outcome.kind == ErrorKind.VALIDATION_ERROR
    assert set(outcome.fields) == {"text", "files"}
    assert outcome.states == [S.IDLE, S.VALIDATING, S.FAILED]
    assert simplify.calls == []
    assert storage.rows == []


@pytest.mark.asyncio
async def test_unsafe_text_rejected_before_rate_check(make_orchestrator, structured_response):
    orchestrator, simplify, _, _ = make_orchestrator(response=structured_response)

    for _ in range(5):
        outcome = await orchestrator.analyze(AnalysisRequest(text="<script>alert(1)</script>"), user_id="u")
        assert outcome.kind == ErrorKind.SECURITY_VIOLATION

    # rejected requests consumed no rate-limit slots
    outcome = await orchestrator.analyze(AnalysisRequest(text="Geçerli metin"), user_id="u")
    assert isinstance(outcome, AnalysisSucceeded)
    assert len(simplify.calls) == 1


@pytest.mark.asyncio
async def test_rate_limit_enforced_per_user(make_orchestrator, structured_response, clock):
    orchestrator, simplify, _, _ = make_orchestrator(response=structured_response)
    request = AnalysisRequest(text="Kira sözleşmesi")

    for _ in range(3):
        assert isinstance(await orchestrator.analyze(request, user_id="user-1"), AnalysisSucceeded)

    outcome = await orchestrator.analyze(request, user_id="user-1")

    assert outcome.kind == ErrorKind.RATE_LIMIT_EXCEEDED
    assert outcome.retry_after == pytest.approx(900.0)
    assert outcome.states == [S.IDLE, S.VALIDATING, S.RATE_CHECKED, S.FAILED]
    assert len(simplify.calls) == 3

    assert isinstance(await orchestrator.analyze(request, user_id="user-2"), AnalysisSucceeded)

    clock.advance(900)
    assert isinstance(await orchestrator.analyze(request, user_id="user-1"), AnalysisSucceeded)


@pytest.mark.asyncio
async def test_mixed_files_sent_as_one_multipart_call(make_orchestrator, legacy_response):
    orchestrator, simplify, storage, _ = make_orchestrator(response=legacy_response)
    request = AnalysisRequest(
        text="Ek açıklama",
        files=[
            BinaryFile(name="ihtar.pdf", type="application/pdf", content=b"%PDF"),
            Base64File(name="foto.jpg", type="image/jpeg", data=base64.b64encode(b"\xff\xd8jpeg").decode()),
        ],
    )

    outcome = await orchestrator.analyze(request, user_id="user-1")

    assert isinstance(outcome, AnalysisSucceeded)
    assert outcome.schema_ == ResponseSchema.LEGACY
    assert S.NORMALIZING in outcome.states

    [call] = simplify.calls
    assert call["json_body"] is None
    assert call["form_data"] == {"model": "flash", "text": "Ek açıklama"}
    assert call["files"] == [
        ("files", ("ihtar.pdf", b"%PDF", "application/pdf")),
        ("files", ("foto.jpg", b"\xff\xd8jpeg", "image/jpeg")),
    ]
    assert storage.rows[0]["original_text"] == "[Files: ihtar.pdf, foto.jpg] Ek açıklama"
    assert storage.rows[0]["action_plan"] == "1. Avukata danışın"


@pytest.mark.asyncio
async def test_files_without_text_omit_text_field(make_orchestrator, legacy_response):
    orchestrator, simplify, _, _ = make_orchestrator(response=legacy_response)

    await orchestrator.analyze(
        AnalysisRequest(files=[BinaryFile(name="a.pdf", type="application/pdf", content=b"a")]),
    )

    assert simplify.calls[0]["form_data"] == {"model": "flash"}


@pytest.mark.asyncio
async def test_decode_failure_makes_no_network_call(make_orchestrator, structured_response):
    orchestrator, simplify, _, _ = make_orchestrator(response=structured_response)
    request = AnalysisRequest(files=[Base64File(name="bozuk.jpg", type="image/jpeg", data="@@@@")])

    outcome = await orchestrator.analyze(request, user_id="user-1")

    assert outcome.kind == ErrorKind.FILE_DECODE_ERROR
    assert "bozuk.jpg" in outcome.fields
    assert outcome.states[-2:] == [S.NORMALIZING, S.FAILED]
    assert simplify.calls == []


@pytest.mark.asyncio
async def test_remote_error_is_not_persisted(make_orchestrator):
    orchestrator, simplify, storage, _ = make_orchestrator(
        simplify_error=RemoteServiceError("Kota aşıldı", status_code=429),
    )

    outcome = await orchestrator.analyze(AnalysisRequest(text="Kira sözleşmesi"), user_id="user-1")

    assert outcome.kind == ErrorKind.REMOTE_SERVICE_ERROR
    assert outcome.message == "Kota aşıldı"
    assert outcome.states[-2:] == [S.INVOKING, S.FAILED]
    assert len(simplify.calls) == 1
    assert storage.rows == [] and storage.credit_calls == []


@pytest.mark.asyncio
async def test_invalid_payload_fails_in_reconciling(make_orchestrator):
    orchestrator, _, storage, _ = make_orchestrator(response="<html>502</html>")

    outcome = await orchestrator.analyze(AnalysisRequest(text="Kira sözleşmesi"), user_id="user-1")

    assert outcome.kind == ErrorKind.REMOTE_SERVICE_ERROR
    assert outcome.states[-2:] == [S.RECONCILING, S.FAILED]
    assert storage.rows == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "origin_host, no_cache, expected",
    [
        ("localhost", None, True),
        ("127.0.0.1", None, True),
        ("artiklo.app", None, False),
        (None, True, True),
    ],
)
async def test_no_cache_flag(make_orchestrator, structured_response, origin_host, no_cache, expected):
    orchestrator, simplify, _, _ = make_orchestrator(response=structured_response)

    await orchestrator.analyze(AnalysisRequest(text="Kira", noCache=no_cache), origin_host=origin_host)

    assert ("noCache" in simplify.calls[0]["json_body"]) is expected


@pytest.mark.asyncio
async def test_anonymous_request_is_not_persisted(make_orchestrator, structured_response):
    orchestrator, _, storage, _ = make_orchestrator(response=structured_response)

    outcome = await orchestrator.analyze(AnalysisRequest(text="Kira sözleşmesi"))

    assert isinstance(outcome, AnalysisSucceeded)
    assert outcome.persisted is False
    assert storage.rows == [] and storage.credit_calls == []


@pytest.mark.asyncio
async def test_persistence_failure_does_not_fail_analysis(make_orchestrator, structured_response):
    storage = FakeStorageClient(insert_error="connection reset")
    orchestrator, _, _, _ = make_orchestrator(response=structured_response, storage=storage)

    outcome = await orchestrator.analyze(AnalysisRequest(text="Kira sözleşmesi"), user_id="user-1")

    assert isinstance(outcome, AnalysisSucceeded)
    assert outcome.persisted is False
    assert outcome.warnings == ["Belge kaydedilemedi. connection reset"]
    assert outcome.states[-1] == S.SUCCEEDED


@pytest.mark.asyncio
async def test_draft_after_analysis(make_orchestrator, structured_response):
    orchestrator, _, _, draft = make_orchestrator(response=structured_response)
    outcome = await orchestrator.analyze(AnalysisRequest(text="Kira sözleşmesi"))

    drafted = await orchestrator.create_draft(outcome.result, "Kira sözleşmesi", token="jwt")

    assert drafted == "TASLAK METİN"
    assert draft.payloads[0]["belge_turu"] == "İhtarname"


@pytest.mark.asyncio
async def test_draft_failure_leaves_result_usable(make_orchestrator):
    orchestrator, _, _, draft = make_orchestrator()
    draft.response = {}
    result = AnalysisResult(documentType="Dilekçe")

    with pytest.raises(DraftGenerationError):
        await orchestrator.create_draft(result, "")

    draft.response = {"draftedDocument": "İKİNCİ DENEME"}
    assert await orchestrator.create_draft(result, "") == "İKİNCİ DENEME"


@pytest.mark.asyncio
async def test_garbled_success_response_charges_nothing(make_orchestrator):
    """
    Test: the simplification function answers 200 with an HTML page.
    Expected: remote service error, no row written, no credit taken.
    """
    orchestrator, _, storage, _ = make_orchestrator()
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    orchestrator.simplify_client = SimplifyClient(
        base_url="https://proje.supabase.co", api_key="anon", transport=transport,
    )

    outcome = await orchestrator.analyze(AnalysisRequest(text="Kira sözleşmesi"), user_id="user-1")
    await orchestrator.close()

    assert outcome.kind == ErrorKind.REMOTE_SERVICE_ERROR
    assert outcome.states[-2:] == [S.INVOKING, S.FAILED]
    assert storage.rows == [] and storage.credit_calls == []
