from pydantic import BaseModel, ConfigDict, Field


class MatchedItems(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills: tuple[str, ...] = ()
    experience: tuple[str, ...] = ()
    education: tuple[str, ...] = ()  # CV education phrases, unfiltered
    keywords: tuple[str, ...] = ()  # plain-word overlap, at most 20


class MissingItems(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills: tuple[str, ...] = ()
    requirements: tuple[str, ...] = ()


class AnalysisResult(BaseModel):
    """Outcome of one CV-vs-job analysis. Immutable and JSON-serializable."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(0, ge=0, le=100)
    matches: MatchedItems = MatchedItems()
    missing: MissingItems = MissingItems()
    suggestions: tuple[str, ...] = ()


class MetricsSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_analyses: int = 0
    average_score: float = 0.0
    average_suggestions: float = 0.0
    average_analysis_ms: float = 0.0
    last_analysis_ms: float = 0.0
    score_distribution: dict[str, int] = {}
    common_missing_skills: dict[str, int] = {}
    requested_skills: dict[str, int] = {}
    errors: dict[str, int] = {}
