import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_analysis_service, get_metrics
from config import settings
from models.requests import QuickAnalyzeRequest
from models.responses import AnalysisResult, MetricsSnapshot
from services import document_parser
from services.analysis_service import AnalysisService
from services.errors import DocumentParseError, InvalidDocumentError
from services.metrics import InMemoryMetrics
from services.skills_taxonomy import SKILLS

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


async def _read_upload(upload: UploadFile, label: str) -> str:
    content = await upload.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"{label} file too large. Max size: {settings.max_upload_size_mb}MB",
        )

    try:
        text = document_parser.extract_text(content, upload.filename, upload.content_type)
    except DocumentParseError as e:
        raise HTTPException(status_code=400, detail=f"Could not read {label} file: {e}")

    if not text.strip():
        raise HTTPException(status_code=400, detail=f"No text could be extracted from {label} file")
    return text


def _check_length(text: str, label: str) -> None:
    if len(text) > settings.max_text_chars:
        raise HTTPException(
            status_code=400,
            detail=f"{label} too long (max {settings.max_text_chars} chars)",
        )


async def _run_analysis(service: AnalysisService, cv_text: str, job_text: str) -> AnalysisResult:
    try:
        return await service.analyze(cv_text, job_text)
    except InvalidDocumentError:
        raise HTTPException(status_code=400, detail="Could not analyze documents")


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "skills_loaded": len(SKILLS),
    }


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(settings.rate_limit)
async def analyze(
    request: Request,
    cv_file: UploadFile = File(...),
    job_file: UploadFile | None = File(None),
    job_text: str | None = Form(None),
    service: AnalysisService = Depends(get_analysis_service),
):
    cv_text = await _read_upload(cv_file, "CV")

    if job_file is not None:
        job_description = await _read_upload(job_file, "Job description")
    elif job_text and job_text.strip():
        job_description = job_text
    else:
        raise HTTPException(status_code=400, detail="Provide a job description file or text")

    _check_length(cv_text, "CV")
    _check_length(job_description, "Job description")

    return await _run_analysis(service, cv_text, job_description)


@router.post("/analyze/quick", response_model=AnalysisResult)
@limiter.limit(settings.rate_limit)
async def analyze_quick(
    request: Request,
    body: QuickAnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    if not body.cv_text.strip() or not body.job_text.strip():
        raise HTTPException(status_code=400, detail="CV and job description must not be empty")
    return await _run_analysis(service, body.cv_text, body.job_text)


@router.get("/metrics", response_model=MetricsSnapshot)
async def metrics_snapshot(metrics: InMemoryMetrics = Depends(get_metrics)):
    return metrics.snapshot()
