"""Tests for the static skills taxonomy."""

import pytest

from services.errors import TaxonomyIntegrityError
from services.skills_taxonomy import (
    SKILLS,
    Skill,
    SkillCategory,
    find_related_skills,
    find_skill,
    get_skills_by_category,
    normalize_skill_name,
    validate_taxonomy,
)


def test_find_skill_by_exact_name():
    skill = find_skill("JavaScript")
    assert skill is not None
    assert skill.name == "JavaScript"
    assert skill.category is SkillCategory.LANGUAGE


def test_find_skill_by_alias():
    assert find_skill("js").name == "JavaScript"
    assert find_skill("K8S").name == "Kubernetes"
    assert find_skill("react.js").name == "React"


def test_find_skill_is_case_insensitive():
    assert find_skill("POSTGRES").name == "PostgreSQL"
    assert find_skill("machine learning").name == "Machine Learning"


def test_find_skill_unknown_returns_none():
    assert find_skill("UnknownTechnology") is None


def test_find_skill_has_no_substring_matching():
    assert find_skill("reac") is None
    assert find_skill("javascript developer") is None


@pytest.mark.parametrize("skill", SKILLS, ids=lambda s: s.name)
def test_every_name_resolves_to_itself(skill):
    assert find_skill(skill.name).name == skill.name
    assert normalize_skill_name(skill.name) == skill.name


@pytest.mark.parametrize("skill", SKILLS, ids=lambda s: s.name)
def test_every_alias_resolves_to_its_skill(skill):
    for alias in skill.aliases:
        assert find_skill(alias).name == skill.name


def test_find_related_skills_for_javascript():
    names = [s.name for s in find_related_skills("JavaScript")]
    assert "TypeScript" in names
    assert "React" in names


def test_find_related_skills_keeps_declared_order_and_drops_dangling():
    # Vuex and Nuxt.js are not in the table
    assert [s.name for s in find_related_skills("Vue.js")] == ["JavaScript"]


def test_find_related_skills_resolves_through_alias():
    assert [s.name for s in find_related_skills("k8s")] == ["Docker"]


def test_find_related_skills_unknown_skill():
    assert find_related_skills("UnknownTechnology") == []


def test_find_related_skills_without_relations():
    assert find_related_skills("Redis") == []


def test_get_skills_by_category():
    languages = get_skills_by_category(SkillCategory.LANGUAGE)
    assert len(languages) > 0
    assert all(s.category is SkillCategory.LANGUAGE for s in languages)


def test_get_skills_by_category_accepts_string_and_keeps_order():
    frameworks = get_skills_by_category("framework")
    declared = [s for s in SKILLS if s.category is SkillCategory.FRAMEWORK]
    assert frameworks == declared


def test_normalize_skill_name_known_alias():
    assert normalize_skill_name("js") == "JavaScript"
    assert normalize_skill_name("typescript") == "TypeScript"


def test_normalize_skill_name_passes_unknown_through():
    assert normalize_skill_name("UnknownTechnology") == "UnknownTechnology"


def test_validate_taxonomy_rejects_alias_collision():
    skills = (
        Skill("Go", SkillCategory.LANGUAGE, aliases=("golang",)),
        Skill("Golang Tools", SkillCategory.TOOL, aliases=("golang",)),
    )
    with pytest.raises(TaxonomyIntegrityError, match="golang"):
        validate_taxonomy(skills)


def test_validate_taxonomy_rejects_name_used_as_other_alias():
    skills = (
        Skill("Docker", SkillCategory.TOOL),
        Skill("Containers", SkillCategory.TOOL, aliases=("docker",)),
    )
    with pytest.raises(TaxonomyIntegrityError):
        validate_taxonomy(skills)


def test_validate_taxonomy_allows_alias_equal_to_own_name():
    index = validate_taxonomy((Skill("Redis", SkillCategory.TOOL, aliases=("redis",)),))
    assert index["redis"].name == "Redis"


def test_skill_is_immutable():
    skill = find_skill("Python")
    with pytest.raises(AttributeError):
        skill.name = "Snake"
