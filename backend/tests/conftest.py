"""Shared test fixtures."""

import pytest

from services.metrics import InMemoryMetrics

SENIOR_CV = (
    "Senior Software Engineer with 7 years of experience. "
    "Expert in React, TypeScript, and Node.js. "
    "Bachelor's in Computer Science."
)

WEB_JOB = (
    "Required: 5+ years of experience in web development. "
    "Strong proficiency in React and TypeScript. "
    "Bachelor's degree in Computer Science."
)

JUNIOR_CV = "Junior Developer, 1 year experience with JavaScript."

SENIOR_FRONTEND_JOB = (
    "Senior Frontend Developer. Requirements: 5+ years experience. "
    "Expert in React, TypeScript, and Angular."
)


@pytest.fixture
def senior_cv() -> str:
    return SENIOR_CV


@pytest.fixture
def web_job() -> str:
    return WEB_JOB


@pytest.fixture
def metrics() -> InMemoryMetrics:
    return InMemoryMetrics()
