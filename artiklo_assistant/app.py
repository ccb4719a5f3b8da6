# artiklo_assistant/app.py
import logging
from contextlib import asynccontextmanager
from typing import List, Literal, Optional, Union
from urllib.parse import urlparse

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile
from starlette.middleware.cors import CORSMiddleware

from artiklo_assistant.config import settings
from artiklo_assistant.core.orchestrator import AnalysisOrchestrator
from artiklo_assistant.exceptions import DraftGenerationError
from artiklo_assistant.models.analysis_models import AnalysisResult
from artiklo_assistant.models.orchestrator_models import AnalysisFailed, ErrorKind
from artiklo_assistant.models.request_models import AnalysisRequest, Base64File, BinaryFile
from artiklo_assistant.security import extract_bearer_token, extract_user_id_from_token

logging.basicConfig(level=settings.LOGGING_LEVEL, format=settings.LOGGING_FORMAT)
logger = logging.getLogger(__name__)

_orchestrator: Optional[AnalysisOrchestrator] = None

ERROR_STATUS = {
    ErrorKind.SECURITY_VIOLATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.FILE_DECODE_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RATE_LIMIT_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.REMOTE_SERVICE_ERROR: status.HTTP_502_BAD_GATEWAY,
}


class AnalyzeJsonRequest(BaseModel):
    """JSON form of ``POST /analyze``: pasted text plus optional captured files."""

    text: Optional[str] = None
    model: Literal["flash", "pro"] = "flash"
    noCache: Optional[bool] = None
    files: List[Base64File] = Field(default_factory=list)


class DraftInput(BaseModel):
    analysisResult: Optional[AnalysisResult] = None
    originalText: str = ""


class DraftOutput(BaseModel):
    draftedDocument: str


def get_orchestrator() -> AnalysisOrchestrator:
    if _orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analiz servisi henüz başlatılmadı.",
        )
    return _orchestrator


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _orchestrator
    logger.info("Initializing analysis orchestrator...")
    _orchestrator = AnalysisOrchestrator()
    yield
    logger.info("Shutting down analysis orchestrator...")
    await _orchestrator.close()
    _orchestrator = None


app = FastAPI(title="Artiklo Document Analysis API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def resolve_identity(request: Request):
    """Returns ``(token, user_id)``; both are ``None`` for anonymous callers."""
    token = extract_bearer_token(request.headers.get("authorization"))
    if not token:
        return None, None
    try:
        return token, extract_user_id_from_token(token)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid token: {e}")


def resolve_origin_host(request: Request) -> Optional[str]:
    origin = request.headers.get("origin")
    if origin:
        return urlparse(origin).hostname
    return request.url.hostname


async def parse_analysis_request(request: Request) -> AnalysisRequest:
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith("multipart/form-data"):
            form = await request.form()
            files: List[Union[BinaryFile, Base64File]] = []
            for item in form.getlist("files"):
                if isinstance(item, UploadFile):
                    files.append(BinaryFile(
                        name=item.filename or "",
                        type=item.content_type or "application/octet-stream",
                        content=await item.read(),
                    ))
            # a file part sent under a field name is ignored, not reported as a schema error
            text = form.get("text")
            model = form.get("model")
            return AnalysisRequest(
                text=text if isinstance(text, str) and text else None,
                model=model if isinstance(model, str) and model else "flash",
                files=files,
            )

        body = AnalyzeJsonRequest.model_validate(await request.json())
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Geçersiz istek gövdesi.")

    return AnalysisRequest(text=body.text, model=body.model, noCache=body.noCache, files=body.files)


@app.post("/analyze")
async def analyze_document(
        request: Request,
        orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    token, user_id = resolve_identity(request)
    analysis_request = await parse_analysis_request(request)

    outcome = await orchestrator.analyze(
        analysis_request,
        user_id=user_id,
        token=token,
        origin_host=resolve_origin_host(request),
    )

    if isinstance(outcome, AnalysisFailed):
        headers = {}
        if outcome.retry_after:
            headers["Retry-After"] = str(int(outcome.retry_after) + 1)
        return JSONResponse(
            status_code=ERROR_STATUS.get(outcome.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
            content=outcome.model_dump(mode="json"),
            headers=headers,
        )

    return outcome.model_dump(mode="json", by_alias=True)


@app.post("/draft", response_model=DraftOutput)
async def create_draft(
        request: Request,
        draft_input: DraftInput,
        orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    token, _ = resolve_identity(request)
    try:
        drafted = await orchestrator.create_draft(
            draft_input.analysisResult, draft_input.originalText, token=token
        )
    except DraftGenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return DraftOutput(draftedDocument=drafted)


@app.get("/health")
def health_check():
    """Service health check."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="127.0.0.1",
        port=settings.API_PORT,
        log_level=settings.LOGGING_LEVEL.lower(),
    )
