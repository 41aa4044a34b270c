"""Shared dependencies for API routes."""

from services.analysis_service import AnalysisService
from services.metrics import InMemoryMetrics

# Process-level recorder; handed to the orchestrator, never imported by the engine
_metrics = InMemoryMetrics()
_analysis_service = AnalysisService(_metrics)


def get_metrics() -> InMemoryMetrics:
    return _metrics


def get_analysis_service() -> AnalysisService:
    return _analysis_service
