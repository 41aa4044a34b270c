import io

import pytest
from docx import Document
from fastapi.testclient import TestClient

from api.dependencies import get_analysis_service, get_metrics
from api.router import limiter
from config import settings
from conftest import JUNIOR_CV, SENIOR_CV, SENIOR_FRONTEND_JOB, WEB_JOB
from main import app
from services.analysis_service import AnalysisService
from services.metrics import InMemoryMetrics
from services.skills_taxonomy import SKILLS

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_state():
    limiter.reset()
    metrics = InMemoryMetrics()
    service = AnalysisService(metrics)
    app.dependency_overrides[get_metrics] = lambda: metrics
    app.dependency_overrides[get_analysis_service] = lambda: service
    yield metrics
    app.dependency_overrides.clear()


def _txt(name: str, text: str):
    return (name, text.encode(), "text/plain")


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["skills_loaded"] == len(SKILLS)


def test_analyze_quick():
    response = client.post("/analyze/quick", json={"cv_text": SENIOR_CV, "job_text": WEB_JOB})
    assert response.status_code == 200
    data = response.json()
    assert data["score"] > 80
    assert "React" in data["matches"]["skills"]
    assert set(data["matches"]) == {"skills", "experience", "education", "keywords"}
    assert set(data["missing"]) == {"skills", "requirements"}
    assert len(data["suggestions"]) >= 3


def test_analyze_quick_weak_match():
    response = client.post(
        "/analyze/quick", json={"cv_text": JUNIOR_CV, "job_text": SENIOR_FRONTEND_JOB}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["score"] < 70
    assert "Angular" in data["missing"]["skills"]


def test_analyze_quick_blank_text():
    response = client.post("/analyze/quick", json={"cv_text": "   ", "job_text": WEB_JOB})
    assert response.status_code == 400


def test_analyze_quick_missing_field():
    response = client.post("/analyze/quick", json={"cv_text": SENIOR_CV})
    assert response.status_code == 422


def test_analyze_quick_text_too_long():
    response = client.post(
        "/analyze/quick", json={"cv_text": "a" * (settings.max_text_chars + 1), "job_text": WEB_JOB}
    )
    assert response.status_code == 422


def test_analyze_with_job_text():
    response = client.post(
        "/analyze",
        files={"cv_file": _txt("cv.txt", SENIOR_CV)},
        data={"job_text": WEB_JOB},
    )
    assert response.status_code == 200
    assert response.json()["score"] > 80


def test_analyze_with_job_file():
    response = client.post(
        "/analyze",
        files={
            "cv_file": _txt("cv.txt", JUNIOR_CV),
            "job_file": _txt("job.txt", SENIOR_FRONTEND_JOB),
        },
    )
    assert response.status_code == 200
    assert "TypeScript" in response.json()["missing"]["skills"]


def test_analyze_with_docx_cv():
    doc = Document()
    for line in SENIOR_CV.split(". "):
        doc.add_paragraph(line)
    buf = io.BytesIO()
    doc.save(buf)

    response = client.post(
        "/analyze",
        files={"cv_file": ("cv.docx", buf.getvalue(), "application/octet-stream")},
        data={"job_text": WEB_JOB},
    )
    assert response.status_code == 200
    assert "TypeScript" in response.json()["matches"]["skills"]


def test_analyze_requires_job_description():
    response = client.post("/analyze", files={"cv_file": _txt("cv.txt", SENIOR_CV)})
    assert response.status_code == 400
    assert "job description" in response.json()["detail"]


def test_analyze_unsupported_file():
    response = client.post(
        "/analyze",
        files={"cv_file": ("cv.exe", b"MZ\x90\x00", "application/octet-stream")},
        data={"job_text": WEB_JOB},
    )
    assert response.status_code == 400
    assert "Could not read CV file" in response.json()["detail"]


def test_analyze_invalid_pdf():
    response = client.post(
        "/analyze",
        files={"cv_file": ("cv.pdf", b"not really a pdf", "application/pdf")},
        data={"job_text": WEB_JOB},
    )
    assert response.status_code == 400
    assert "Invalid PDF format" in response.json()["detail"]


def test_analyze_empty_cv_file():
    response = client.post(
        "/analyze",
        files={"cv_file": _txt("cv.txt", "   ")},
        data={"job_text": WEB_JOB},
    )
    assert response.status_code == 400


def test_analyze_file_too_large():
    big = b"a" * (settings.max_upload_size_mb * 1024 * 1024 + 1)
    response = client.post(
        "/analyze",
        files={"cv_file": ("cv.txt", big, "text/plain")},
        data={"job_text": WEB_JOB},
    )
    assert response.status_code == 400
    assert "too large" in response.json()["detail"]


def test_metrics_endpoint_counts_analyses(fresh_state):
    client.post("/analyze/quick", json={"cv_text": SENIOR_CV, "job_text": WEB_JOB})
    client.post("/analyze/quick", json={"cv_text": JUNIOR_CV, "job_text": SENIOR_FRONTEND_JOB})

    response = client.get("/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["total_analyses"] == 2
    assert sum(data["score_distribution"].values()) == 2
    assert data["common_missing_skills"]["Angular"] == 1
    assert fresh_state.snapshot().total_analyses == 2


def test_rate_limit():
    allowed = int(settings.rate_limit.split("/")[0])
    payload = {"cv_text": SENIOR_CV, "job_text": WEB_JOB}
    for _ in range(allowed):
        assert client.post("/analyze/quick", json=payload).status_code == 200
    assert client.post("/analyze/quick", json=payload).status_code == 429
