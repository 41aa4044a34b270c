"""Static skills taxonomy: canonical names, categories, aliases and related links.

The table is validated once at import time (no name/alias may be claimed by
two skills) and served from a lowercase lookup index afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from services.errors import TaxonomyIntegrityError

logger = logging.getLogger(__name__)


class SkillCategory(str, Enum):
    TECHNICAL = "technical"
    SOFT = "soft"
    DOMAIN = "domain"
    TOOL = "tool"
    LANGUAGE = "language"
    FRAMEWORK = "framework"


@dataclass(frozen=True)
class Skill:
    """A single taxonomy entry.

    ``related`` holds canonical names of adjacent skills. It is only used to
    corroborate extraction, never to decide that two skills match.
    """

    name: str
    category: SkillCategory
    aliases: tuple[str, ...] = ()
    related: tuple[str, ...] = ()

    def surface_forms(self) -> tuple[str, ...]:
        """Name followed by aliases, lowercased."""
        return (self.name.lower(),) + tuple(a.lower() for a in self.aliases)


# ---------------------------------------------------------------------------
# Skill table (declaration order is the order returned by category lookups)
# ---------------------------------------------------------------------------
SKILLS: tuple[Skill, ...] = (
    # Programming languages
    Skill("JavaScript", SkillCategory.LANGUAGE,
          aliases=("js", "javascript", "ecmascript", "es6"),
          related=("TypeScript", "Node.js", "React", "Vue.js", "Angular")),
    Skill("TypeScript", SkillCategory.LANGUAGE,
          aliases=("ts", "typescript"),
          related=("JavaScript", "Node.js", "Angular")),
    Skill("Python", SkillCategory.LANGUAGE,
          aliases=("py", "python3", "python2"),
          related=("Django", "Flask", "FastAPI", "NumPy", "Pandas")),
    Skill("Java", SkillCategory.LANGUAGE,
          aliases=("java8", "java 8"),
          related=("Spring",)),
    Skill("C#", SkillCategory.LANGUAGE,
          aliases=("csharp", "c sharp")),
    Skill("C++", SkillCategory.LANGUAGE,
          aliases=("cpp", "c plus plus")),
    Skill("Golang", SkillCategory.LANGUAGE,
          aliases=("go lang",)),
    Skill("Ruby", SkillCategory.LANGUAGE,
          related=("Ruby on Rails",)),
    Skill("SQL", SkillCategory.LANGUAGE,
          aliases=("structured query language",),
          related=("PostgreSQL", "MySQL")),
    Skill("HTML", SkillCategory.LANGUAGE,
          aliases=("html5",),
          related=("CSS", "JavaScript")),
    Skill("CSS", SkillCategory.LANGUAGE,
          aliases=("css3", "sass", "scss"),
          related=("HTML",)),

    # Frameworks
    Skill("React", SkillCategory.FRAMEWORK,
          aliases=("reactjs", "react.js", "react native"),
          related=("JavaScript", "TypeScript", "Redux", "Next.js")),
    Skill("Angular", SkillCategory.FRAMEWORK,
          aliases=("angularjs", "angular.js", "angular2+", "ng"),
          related=("TypeScript", "RxJS", "JavaScript")),
    Skill("Vue.js", SkillCategory.FRAMEWORK,
          aliases=("vue", "vuejs", "vue3"),
          related=("JavaScript", "Vuex", "Nuxt.js")),
    Skill("Next.js", SkillCategory.FRAMEWORK,
          aliases=("nextjs",),
          related=("React",)),
    Skill("Redux", SkillCategory.FRAMEWORK,
          aliases=("redux toolkit",),
          related=("React",)),
    Skill("Node.js", SkillCategory.FRAMEWORK,
          aliases=("nodejs",),
          related=("JavaScript", "Express", "TypeScript")),
    Skill("Express", SkillCategory.FRAMEWORK,
          aliases=("express.js", "expressjs"),
          related=("Node.js",)),
    Skill("Django", SkillCategory.FRAMEWORK,
          related=("Python",)),
    Skill("Flask", SkillCategory.FRAMEWORK,
          related=("Python",)),
    Skill("FastAPI", SkillCategory.FRAMEWORK,
          aliases=("fast api",),
          related=("Python",)),
    Skill("Spring", SkillCategory.FRAMEWORK,
          aliases=("spring boot", "springboot"),
          related=("Java",)),
    Skill("NumPy", SkillCategory.FRAMEWORK,
          related=("Python", "Pandas")),
    Skill("Pandas", SkillCategory.FRAMEWORK,
          related=("Python", "NumPy")),

    # Databases
    Skill("PostgreSQL", SkillCategory.TOOL,
          aliases=("postgres", "postgresql", "psql"),
          related=("SQL", "Database", "MySQL")),
    Skill("MySQL", SkillCategory.TOOL,
          aliases=("my sql",),
          related=("SQL", "PostgreSQL")),
    Skill("MongoDB", SkillCategory.TOOL,
          aliases=("mongo", "mongodb", "nosql"),
          related=("NoSQL", "Database", "Mongoose")),
    Skill("Redis", SkillCategory.TOOL),

    # Cloud & DevOps
    Skill("AWS", SkillCategory.TOOL,
          aliases=("amazon web services", "aws cloud", "amazon aws"),
          related=("Cloud Computing", "S3", "EC2", "Lambda")),
    Skill("Azure", SkillCategory.TOOL,
          aliases=("microsoft azure",)),
    Skill("GCP", SkillCategory.TOOL,
          aliases=("google cloud", "google cloud platform")),
    Skill("Docker", SkillCategory.TOOL,
          aliases=("docker container", "containerization"),
          related=("Kubernetes", "DevOps", "CI/CD")),
    Skill("Kubernetes", SkillCategory.TOOL,
          aliases=("k8s",),
          related=("Docker", "Helm")),
    Skill("Terraform", SkillCategory.TOOL,
          related=("AWS", "DevOps")),
    Skill("Jenkins", SkillCategory.TOOL,
          related=("CI/CD",)),
    Skill("CI/CD", SkillCategory.TOOL,
          aliases=("cicd", "ci cd", "continuous integration"),
          related=("Jenkins", "Docker")),
    Skill("Git", SkillCategory.TOOL,
          related=("GitHub",)),

    # APIs & architecture
    Skill("GraphQL", SkillCategory.TECHNICAL,
          aliases=("graph ql",)),
    Skill("REST", SkillCategory.TECHNICAL,
          aliases=("restful", "rest api", "rest apis"),
          related=("GraphQL",)),
    Skill("Microservices", SkillCategory.TECHNICAL,
          aliases=("microservice", "micro services"),
          related=("Docker", "Kubernetes")),
    Skill("System Design", SkillCategory.TECHNICAL,
          aliases=("systems design", "software architecture")),
    Skill("Unit Testing", SkillCategory.TECHNICAL,
          aliases=("unit tests", "tdd", "test driven development")),

    # Soft skills
    Skill("Project Management", SkillCategory.SOFT,
          aliases=("program management", "project lead", "project leadership"),
          related=("Agile", "Scrum", "Team Leadership")),
    Skill("Team Leadership", SkillCategory.SOFT,
          aliases=("team lead", "technical lead", "tech lead", "team leadership"),
          related=("Project Management", "People Management")),
    Skill("Communication", SkillCategory.SOFT,
          aliases=("communication skills",)),
    Skill("Agile", SkillCategory.SOFT,
          aliases=("agile methodology",),
          related=("Scrum",)),
    Skill("Scrum", SkillCategory.SOFT,
          related=("Agile",)),

    # Domain knowledge
    Skill("Machine Learning", SkillCategory.DOMAIN,
          aliases=("ml", "deep learning", "ai", "artificial intelligence"),
          related=("Python", "TensorFlow", "PyTorch", "Data Science")),
    Skill("Data Science", SkillCategory.DOMAIN,
          aliases=("data analysis", "data analytics"),
          related=("Python", "Machine Learning", "Pandas")),
    Skill("Frontend Development", SkillCategory.DOMAIN,
          aliases=("frontend", "front-end", "front end"),
          related=("JavaScript", "HTML", "CSS", "React")),
    Skill("Backend Development", SkillCategory.DOMAIN,
          aliases=("backend", "back-end", "back end"),
          related=("Node.js", "Python", "Java")),
    Skill("Full Stack Development", SkillCategory.DOMAIN,
          aliases=("full stack", "full-stack", "fullstack"),
          related=("Frontend Development", "Backend Development")),
    Skill("DevOps", SkillCategory.DOMAIN,
          aliases=("dev ops", "site reliability"),
          related=("Docker", "Kubernetes", "CI/CD")),
)


def validate_taxonomy(skills: tuple[Skill, ...] | list[Skill]) -> dict[str, Skill]:
    """Build the lowercase surface-form index, rejecting ambiguous entries.

    Raises TaxonomyIntegrityError if a name or alias belongs to two skills.
    """
    index: dict[str, Skill] = {}
    for skill in skills:
        for form in skill.surface_forms():
            owner = index.get(form)
            if owner is not None and owner.name != skill.name:
                raise TaxonomyIntegrityError(
                    f"'{form}' is claimed by both '{owner.name}' and '{skill.name}'"
                )
            index[form] = skill
    return index


_INDEX = validate_taxonomy(SKILLS)
logger.debug("Skills taxonomy loaded: %d skills, %d surface forms", len(SKILLS), len(_INDEX))


def find_skill(text: str) -> Skill | None:
    """Case-insensitive exact lookup by canonical name or alias."""
    return _INDEX.get(text.strip().lower())


def find_related_skills(name: str) -> list[Skill]:
    """Resolve a skill's related names, dropping any that are not in the table."""
    skill = find_skill(name)
    if skill is None:
        return []
    related = (find_skill(r) for r in skill.related)
    return [r for r in related if r is not None]


def get_skills_by_category(category: SkillCategory | str) -> list[Skill]:
    category = SkillCategory(category)
    return [s for s in SKILLS if s.category is category]


def normalize_skill_name(text: str) -> str:
    """Canonical name for a known skill, otherwise the input unchanged."""
    skill = find_skill(text)
    return skill.name if skill else text
