# artiklo_assistant/cli.py
import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from artiklo_assistant.config import settings
from artiklo_assistant.core.orchestrator import AnalysisOrchestrator
from artiklo_assistant.exceptions import DraftGenerationError
from artiklo_assistant.models.analysis_models import AnalysisResult
from artiklo_assistant.models.orchestrator_models import AnalysisFailed
from artiklo_assistant.models.request_models import AnalysisRequest, BinaryFile
from artiklo_assistant.security import extract_user_id_from_token
from artiklo_assistant.utils.json_encoder import dumps

logger = logging.getLogger(__name__)


def _load_files(paths: List[str]) -> List[BinaryFile]:
    files = []
    for raw_path in paths:
        path = Path(raw_path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files.append(BinaryFile(name=path.name, type=content_type, content=path.read_bytes()))
    return files


async def _run_analyze(args: argparse.Namespace) -> int:
    user_id = extract_user_id_from_token(args.token) if args.token else None
    request = AnalysisRequest(
        text=args.text,
        files=_load_files(args.file or []),
        model=args.model,
        noCache=args.no_cache or None,
    )

    orchestrator = AnalysisOrchestrator()
    try:
        outcome = await orchestrator.analyze(request, user_id=user_id, token=args.token)
    finally:
        await orchestrator.close()

    print(dumps(outcome.model_dump(mode="json", by_alias=True)))
    return 1 if isinstance(outcome, AnalysisFailed) else 0


async def _run_draft(args: argparse.Namespace) -> int:
    data = json.loads(Path(args.analysis).read_text(encoding="utf-8"))
    # Accepts either a bare AnalysisResult or a full /analyze response
    result = AnalysisResult.model_validate(data.get("result", data))

    orchestrator = AnalysisOrchestrator()
    try:
        drafted = await orchestrator.create_draft(result, args.original_text or "", token=args.token)
    except DraftGenerationError as e:
        print(f"Taslak üretilemedi: {e.message}", file=sys.stderr)
        return 1
    finally:
        await orchestrator.close()

    print(drafted)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artiklo-assistant",
        description="Legal document simplification and drafting.",
    )
    parser.add_argument("--token", help="User access token (JWT)")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Simplify and analyze a document")
    analyze.add_argument("--text", help="Pasted document text")
    analyze.add_argument("--file", action="append", help="Document file; may be repeated")
    analyze.add_argument("--model", choices=["flash", "pro"], default="flash")
    analyze.add_argument("--no-cache", action="store_true", help="Bypass the server-side result cache")

    draft = sub.add_parser("draft", help="Draft a reply document from a saved analysis")
    draft.add_argument("--analysis", required=True, help="JSON file with an analysis result")
    draft.add_argument("--original-text", help="Original document text")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=settings.LOGGING_LEVEL, format=settings.LOGGING_FORMAT, stream=sys.stderr)
    args = build_parser().parse_args(argv)

    if args.command == "analyze":
        return asyncio.run(_run_analyze(args))
    return asyncio.run(_run_draft(args))


if __name__ == "__main__":
    sys.exit(main())
