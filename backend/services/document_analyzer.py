"""Deterministic CV-to-job matching engine.

Pipeline (one call, no shared state):
1. Extract skills, experience, education and requirement phrases per text
2. Match CV skills against job skills (strict taxonomy equivalence)
3. Match CV experience phrases against job requirement phrases (years + shared word)
4. Compute the 0-100 score, gap suggestions and keyword overlap
"""

import logging
import re

from models.responses import AnalysisResult, MatchedItems, MissingItems
from services.errors import InvalidDocumentError
from services.skills_taxonomy import (
    SKILLS,
    Skill,
    find_related_skills,
    find_skill,
    normalize_skill_name,
)

logger = logging.getLogger(__name__)

# Score weights and absolute-gap penalties
W_SKILLS = 0.5
W_EXPERIENCE = 0.5
MISSING_SKILL_PENALTY = 10
UNMATCHED_REQUIREMENT_PENALTY = 10

MAX_WINDOW = 3
MAX_KEYWORDS = 20
MAX_GAP_SUGGESTIONS = 2

EDUCATION_SUGGESTION = "Add your educational background to strengthen your profile"
GENERAL_SUGGESTIONS: tuple[str, ...] = (
    "Quantify your achievements with metrics where possible",
    "Use action verbs to describe your experience",
    "Ensure your CV is tailored to the specific role",
)

# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------

# Keeps tech punctuation inside tokens: "node.js", "c++", "c#", "ci/cd"
_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9.+#/-]*")
_KEYWORD_RE = re.compile(r"[a-z0-9][a-z0-9+#]*")

KEYWORD_STOPWORDS: frozenset[str] = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has",
    "have", "in", "is", "it", "of", "on", "or", "our", "that", "the", "this",
    "to", "we", "will", "with", "you", "your",
})

# Function words ignored when looking for a word shared by two phrases
_FUNCTION_WORDS: frozenset[str] = frozenset({
    "and", "the", "with", "for", "from", "into", "our", "you", "your", "are",
    "was", "were", "has", "have", "had", "not", "but", "all", "any", "can",
    "will", "who", "that", "this", "their", "they", "its", "per", "via",
})


def _tokenize(text: str) -> list[str]:
    tokens = (t.rstrip(".-/") for t in _TOKEN_RE.findall(text.lower()))
    return [t for t in tokens if t]


def _windows(tokens: list[str], size: int = MAX_WINDOW):
    """Yield every 1..size token phrase."""
    for i in range(len(tokens)):
        for n in range(1, size + 1):
            if i + n > len(tokens):
                break
            yield " ".join(tokens[i:i + n])


def _mentions(text_lower: str, term: str) -> bool:
    """Word-boundary aware containment check.

    "java" is not in "javascript", "js" is not in "node.js", "ai" is not in "maintain".
    """
    escaped = re.escape(term.lower())
    return re.search(rf"(?<![a-z0-9.#]){escaped}(?![a-z0-9])", text_lower) is not None


def _skill_mentioned(skill: Skill, text_lower: str) -> bool:
    return any(_mentions(text_lower, form) for form in skill.surface_forms())


# ---------------------------------------------------------------------------
# Extraction patterns
# ---------------------------------------------------------------------------

# Runs to the end of the sentence; a period only ends it when followed by
# whitespace or end of text, so "Node.js" stays whole.
_PHRASE = r"(?:[^.;\n]|\.(?=\S))+"

EXPERIENCE_PATTERNS: list[re.Pattern] = [
    re.compile(r"\b\d+\+?\s*years?(?:\s+of)?\s+experience\b", re.IGNORECASE),
    re.compile(rf"\b(?:worked|working)\s+(?:as|with|in|at)\s+{_PHRASE}", re.IGNORECASE),
    re.compile(rf"\b(?:senior|lead|principal)\s+{_PHRASE}", re.IGNORECASE),
]

_DEGREE = (
    r"(?:(?:bachelor|master)(?:['’]s|s|(?=\s+(?:degree|in|of)\b))"
    r"|ph\.?\s?d\.?|doctorate|degree"
    r"|[bm]\.[sa]\.)"
)
_FIELD_OF_STUDY = r"(?:\s+(?:degree\s+)?(?:in|of)\s+[a-z][\w&-]*(?:\s+[a-z][\w&-]*){0,3})?"
EDUCATION_PATTERN = re.compile(rf"\b{_DEGREE}(?![a-z]){_FIELD_OF_STUDY}", re.IGNORECASE)

REQUIREMENT_PATTERNS: list[re.Pattern] = [
    re.compile(
        rf"\b(?:required|requirements|qualifications|must have)[ \t]*:?[ \t]*(?=[^\s:]){_PHRASE}",
        re.IGNORECASE,
    ),
    re.compile(
        rf"\b\d+\+?\s*years?(?:\s+of)?\s+experience\s+(?:in|with)\s+{_PHRASE}",
        re.IGNORECASE,
    ),
    re.compile(rf"\bproficiency\s+in\s+{_PHRASE}", re.IGNORECASE),
]

_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)


def _clean(phrase: str) -> str:
    return phrase.strip(" \t,:;-")


def _collect(text: str, patterns: list[re.Pattern]) -> set[str]:
    found: set[str] = set()
    for pattern in patterns:
        for match in pattern.finditer(text):
            phrase = _clean(match.group(0))
            if phrase:
                found.add(phrase)
    return found


def _fold_nested(phrases: set[str]) -> set[str]:
    """Drop phrases that are contained in a longer phrase of the same set."""
    lowered = {p: p.lower() for p in phrases}
    return {
        p for p in phrases
        if not any(
            len(lowered[other]) > len(lowered[p]) and lowered[p] in lowered[other]
            for other in phrases
        )
    }


def extract_skills(text: str) -> set[str]:
    """Extract canonical skill names from text.

    Two passes: 1-3 token windows resolved through the taxonomy (plus related
    skills that are also mentioned), then a full taxonomy scan for names or
    aliases the windowing missed.
    """
    text_lower = text.lower()
    found: set[str] = set()

    for phrase in _windows(_tokenize(text_lower)):
        skill = find_skill(phrase)
        if skill is None:
            continue
        found.add(skill.name)
        for related in find_related_skills(skill.name):
            if related.name not in found and _skill_mentioned(related, text_lower):
                found.add(related.name)

    for skill in SKILLS:
        if skill.name not in found and _skill_mentioned(skill, text_lower):
            found.add(skill.name)

    return found


def extract_experience(text: str) -> set[str]:
    return _collect(text, EXPERIENCE_PATTERNS)


def extract_education(text: str) -> set[str]:
    return _collect(text, [EDUCATION_PATTERN])


def extract_requirements(text: str) -> set[str]:
    """Extract requirement phrases; a requirement nested in a longer one is folded in."""
    return _fold_nested(_collect(text, REQUIREMENT_PATTERNS))


def extract_keywords(cv_text: str, job_text: str) -> list[str]:
    """Plain lowercase words shared by both texts, stopwords removed, at most 20."""
    cv_words = set(_KEYWORD_RE.findall(cv_text.lower()))
    job_words = set(_KEYWORD_RE.findall(job_text.lower()))
    shared = (cv_words & job_words) - KEYWORD_STOPWORDS
    return sorted(shared)[:MAX_KEYWORDS]


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

SPELLING_VARIANTS: dict[str, str] = {
    "react.js": "react",
    "reactjs": "react",
    "node.js": "nodejs",
    "node": "nodejs",
    "vue.js": "vue",
    "vuejs": "vue",
    "next.js": "nextjs",
    "express.js": "express",
    "angular.js": "angularjs",
    "k8s": "kubernetes",
}

_SENIORITY_PREFIX_RE = re.compile(r"^(?:senior|junior|lead|principal|staff|sr|jr)\.?\s+")
_ROLE_SUFFIX_RE = re.compile(
    r"\s+(?:developer|engineer|programmer|specialist|architect|consultant|expert)s?$"
)
_PUNCT_RE = re.compile(r"[^\w\s+#]")


def _normalize_term(text: str) -> str:
    term = text.lower().strip()
    term = SPELLING_VARIANTS.get(term, term)
    term = _SENIORITY_PREFIX_RE.sub("", term)
    term = _PUNCT_RE.sub("", term)
    term = re.sub(r"\s+", " ", term).strip()
    term = _ROLE_SUFFIX_RE.sub("", term)
    term = SPELLING_VARIANTS.get(term, term)
    return normalize_skill_name(term)


def is_match(a: str, b: str) -> bool:
    """Strict skill equivalence.

    Identical normalized forms, the same canonical skill, or one skill's alias
    equal to the other's normalized text. Related skills never match and there
    is no substring fallback.
    """
    norm_a, norm_b = _normalize_term(a), _normalize_term(b)
    if norm_a == norm_b:
        return True

    skill_a, skill_b = find_skill(norm_a), find_skill(norm_b)
    if skill_a is None or skill_b is None:
        return False
    if skill_a.name == skill_b.name:
        return True

    aliases_a = {alias.lower() for alias in skill_a.aliases}
    aliases_b = {alias.lower() for alias in skill_b.aliases}
    return norm_b.lower() in aliases_a or norm_a.lower() in aliases_b


def extract_years(phrase: str) -> int | None:
    """First "<N>(+) years" count in a phrase, or None."""
    match = _YEARS_RE.search(phrase)
    return int(match.group(1)) if match else None


def _content_words(phrase: str) -> set[str]:
    words = re.split(r"[^a-z0-9+#]+", phrase.lower())
    return {w for w in words if len(w) > 2 and w not in _FUNCTION_WORDS}


def is_experience_match(exp: str, req: str) -> bool:
    """Strict experience check: both phrases state years, CV years cover the
    requirement, and the phrases share at least one content word.
    """
    exp_years, req_years = extract_years(exp), extract_years(req)
    if exp_years is None or req_years is None:
        return False
    if exp_years < req_years:
        return False
    return bool(_content_words(exp) & _content_words(req))


# ---------------------------------------------------------------------------
# Scoring & suggestions
# ---------------------------------------------------------------------------


def _ratio_score(matched: int, total: int) -> float:
    """Coverage percentage clamped to 0-100; an empty target is a vacuous pass."""
    if total == 0:
        return 100.0
    return min(100.0, max(0.0, 100.0 * matched / total))


def calculate_score(
    matched_skills: list[str],
    job_skills: list[str],
    cv_experience: list[str],
    job_requirements: list[str],
) -> int:
    """Weighted coverage score minus an absolute-gap penalty. Returns 0-100."""
    skills_score = _ratio_score(len(matched_skills), len(job_skills))

    matched_experience = sum(
        1 for exp in cv_experience
        if any(is_experience_match(exp, req) for req in job_requirements)
    )
    experience_score = _ratio_score(matched_experience, len(job_requirements))

    missing_skills = sum(
        1 for skill in job_skills
        if not any(is_match(m, skill) for m in matched_skills)
    )
    unmatched_requirements = sum(
        1 for req in job_requirements
        if not any(is_experience_match(exp, req) for exp in cv_experience)
    )

    raw = (
        W_SKILLS * skills_score
        + W_EXPERIENCE * experience_score
        - MISSING_SKILL_PENALTY * missing_skills
        - UNMATCHED_REQUIREMENT_PENALTY * unmatched_requirements
    )
    return min(100, max(0, round(raw)))


def generate_suggestions(
    missing_skills: list[str],
    unmatched_requirements: list[str],
    cv_education: list[str],
) -> list[str]:
    """Gap suggestions in fixed order, followed by the three general ones.

    At most MAX_GAP_SUGGESTIONS gap lines are kept, so the education line is
    dropped when both skill and requirement gaps are reported.
    """
    gaps: list[str] = []
    if missing_skills:
        gaps.append(f"Consider adding experience with: {', '.join(missing_skills)}")
    if unmatched_requirements:
        gaps.append(f"Highlight experience matching: {'; '.join(unmatched_requirements)}")
    if not cv_education:
        gaps.append(EDUCATION_SUGGESTION)
    return gaps[:MAX_GAP_SUGGESTIONS] + list(GENERAL_SUGGESTIONS)


def _require_text(value: object, name: str) -> None:
    if not isinstance(value, str):
        raise InvalidDocumentError(
            f"{name} must be plain text, got {type(value).__name__}"
        )


def analyze(cv_text: str, job_text: str) -> AnalysisResult:
    """Score a CV against a job description."""
    _require_text(cv_text, "cv_text")
    _require_text(job_text, "job_text")

    cv_skills = sorted(extract_skills(cv_text))
    job_skills = sorted(extract_skills(job_text))
    cv_experience = sorted(extract_experience(cv_text))
    cv_education = sorted(extract_education(cv_text))
    job_requirements = sorted(extract_requirements(job_text))
    logger.debug(
        "Extracted cv_skills=%d job_skills=%d cv_experience=%d cv_education=%d job_requirements=%d",
        len(cv_skills), len(job_skills), len(cv_experience), len(cv_education),
        len(job_requirements),
    )

    matched_skills = [s for s in cv_skills if any(is_match(s, js) for js in job_skills)]
    missing_skills = [s for s in job_skills if not any(is_match(cs, s) for cs in cv_skills)]
    matched_experience = [
        exp for exp in cv_experience
        if any(is_experience_match(exp, req) for req in job_requirements)
    ]
    unmatched_requirements = [
        req for req in job_requirements
        if not any(is_experience_match(exp, req) for exp in cv_experience)
    ]

    score = calculate_score(matched_skills, job_skills, cv_experience, job_requirements)
    suggestions = generate_suggestions(missing_skills, unmatched_requirements, cv_education)
    logger.debug("Match score %d (%d skills missing)", score, len(missing_skills))

    return AnalysisResult(
        score=score,
        matches=MatchedItems(
            skills=tuple(matched_skills),
            experience=tuple(matched_experience),
            education=tuple(cv_education),
            keywords=tuple(extract_keywords(cv_text, job_text)),
        ),
        missing=MissingItems(
            skills=tuple(missing_skills),
            requirements=tuple(unmatched_requirements),
        ),
        suggestions=tuple(suggestions),
    )
