"""Metrics port for analysis telemetry.

The engine never touches metrics; the orchestrator receives a recorder and
reports each finished analysis (or failure) to it.
"""

import logging
import threading
from collections import Counter
from typing import Protocol

from models.responses import AnalysisResult, MetricsSnapshot

logger = logging.getLogger(__name__)

SCORE_BUCKETS: tuple[tuple[int, int], ...] = (
    (0, 20), (21, 40), (41, 60), (61, 80), (81, 100),
)


def _bucket_label(score: int) -> str:
    for low, high in SCORE_BUCKETS:
        if low <= score <= high:
            return f"{low}-{high}"
    return "out-of-range"


class MetricsRecorder(Protocol):
    def record_analysis(self, result: AnalysisResult, duration_s: float) -> None: ...

    def record_error(self, kind: str) -> None: ...


class NullMetrics:
    """Recorder that discards everything."""

    def record_analysis(self, result: AnalysisResult, duration_s: float) -> None:
        pass

    def record_error(self, kind: str) -> None:
        pass


class InMemoryMetrics:
    """Process-local aggregate of analysis outcomes. Thread-safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._score_sum = 0
            self._suggestion_sum = 0
            self._duration_sum = 0.0
            self._last_duration = 0.0
            self._distribution: Counter[str] = Counter({
                f"{low}-{high}": 0 for low, high in SCORE_BUCKETS
            })
            self._missing_skills: Counter[str] = Counter()
            self._requested_skills: Counter[str] = Counter()
            self._errors: Counter[str] = Counter()

    def record_analysis(self, result: AnalysisResult, duration_s: float) -> None:
        with self._lock:
            self._total += 1
            self._score_sum += result.score
            self._suggestion_sum += len(result.suggestions)
            self._duration_sum += duration_s
            self._last_duration = duration_s
            self._distribution[_bucket_label(result.score)] += 1
            self._missing_skills.update(result.missing.skills)
            # Job skills = matched + missing
            self._requested_skills.update(result.matches.skills)
            self._requested_skills.update(result.missing.skills)

    def record_error(self, kind: str) -> None:
        with self._lock:
            self._errors[kind] += 1
        logger.debug("Recorded %s error", kind)

    def snapshot(self, top_n: int = 10) -> MetricsSnapshot:
        with self._lock:
            total = self._total
            return MetricsSnapshot(
                total_analyses=total,
                average_score=round(self._score_sum / total, 2) if total else 0.0,
                average_suggestions=round(self._suggestion_sum / total, 2) if total else 0.0,
                average_analysis_ms=round(self._duration_sum / total * 1000, 3) if total else 0.0,
                last_analysis_ms=round(self._last_duration * 1000, 3),
                score_distribution=dict(self._distribution),
                common_missing_skills=dict(self._missing_skills.most_common(top_n)),
                requested_skills=dict(self._requested_skills.most_common(top_n)),
                errors=dict(self._errors),
            )
