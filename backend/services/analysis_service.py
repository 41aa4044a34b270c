"""Orchestrator: runs the matching engine with timing, logging and metrics.

The engine is synchronous and CPU-bound; async callers get it on a worker
thread so the event loop stays free.
"""

import asyncio
import logging
import time

from models.responses import AnalysisResult
from services import document_analyzer
from services.errors import InvalidDocumentError
from services.metrics import MetricsRecorder, NullMetrics

logger = logging.getLogger(__name__)


class AnalysisService:
    def __init__(self, metrics: MetricsRecorder | None = None) -> None:
        self.metrics: MetricsRecorder = metrics if metrics is not None else NullMetrics()

    def run(self, cv_text: str, job_text: str) -> AnalysisResult:
        start = time.perf_counter()
        try:
            result = document_analyzer.analyze(cv_text, job_text)
        except InvalidDocumentError as e:
            logger.warning("Rejected analysis input: %s", e)
            self.metrics.record_error("invalid_input")
            raise
        except Exception:
            logger.exception("Analysis failed")
            self.metrics.record_error("analysis")
            raise

        duration = time.perf_counter() - start
        self.metrics.record_analysis(result, duration)
        logger.info(
            "Analysis complete: score=%d missing_skills=%d in %.1fms",
            result.score, len(result.missing.skills), duration * 1000,
        )
        return result

    async def analyze(self, cv_text: str, job_text: str) -> AnalysisResult:
        return await asyncio.to_thread(self.run, cv_text, job_text)
