"""Tests for pattern-based skill mining from job descriptions."""

import pytest

from models.schemas.extraction import SkillExperience
from models.schemas.skill import SkillAlias
from services.skill_extractor import (
    CATEGORY_NAMES,
    battery_terms,
    categorize_skills,
    extract_skills,
    extract_skills_with_experience,
    score_richness,
)
from services.skill_taxonomy import SkillTaxonomy, get_taxonomy


class TestExtractSkills:
    def test_finds_common_technologies(self):
        skills = extract_skills(
            "Looking for a developer with experience in React, Node.js and PostgreSQL."
        )
        assert skills == ["React", "Node.js", "PostgreSQL"]

    def test_no_technical_skills(self):
        assert extract_skills("No technical skills mentioned here") == []
        assert extract_skills("We value teamwork") == []

    @pytest.mark.parametrize("value", ["", None, 123, ["React"]])
    def test_empty_or_non_string_input(self, value):
        assert extract_skills(value) == []

    def test_java_not_in_javascript(self):
        skills = extract_skills("Proficient in JavaScript and TypeScript")
        assert skills == ["JavaScript", "TypeScript"]
        assert "Java" not in skills

    def test_name_crossing_requirement_window_edge(self):
        # the 100-character window after "experience with" ends inside "JavaScript"
        text = "experience with " + "a" * 94 + " JavaScript developers wanted"
        assert extract_skills(text) == ["JavaScript"]

    def test_js_not_in_dotted_names(self):
        skills = extract_skills("Built APIs with Node.js and Next.js")
        assert "Node.js" in skills
        assert "Next.js" in skills
        assert "JavaScript" not in skills

    def test_variations_normalized(self):
        skills = extract_skills("js, ts, reactjs, nodejs, postgres")
        assert skills == ["JavaScript", "TypeScript", "React", "Node.js", "PostgreSQL"]

    def test_spring_boot_maps_to_spring(self):
        assert extract_skills("We use Spring Boot for services") == ["Spring"]

    def test_ci_cd(self):
        assert "CI/CD" in extract_skills("Experience with CI/CD pipelines")

    def test_ambiguous_words_need_their_casing(self):
        assert extract_skills("We go the extra mile and rest on weekends") == []
        skills = extract_skills("Backend written in Go with a REST interface")
        assert "Go" in skills
        assert "REST API" in skills

    def test_sentence_openers_alone_are_not_skills(self):
        assert extract_skills("Go above and beyond. Less process, more impact.") == []
        assert extract_skills("Swift delivery matters.\nRust never sleeps.") == []

    def test_sentence_openers_kept_alongside_other_skills(self):
        skills = extract_skills("Go services on AWS. Rust for the hot path.")
        assert skills == ["AWS", "Go", "Rust"]

    def test_sentence_opener_after_requirement_phrase(self):
        assert extract_skills("Requirements:\nGo.") == ["Go"]

    def test_longest_name_wins(self):
        skills = extract_skills("Mobile team ships React Native apps backed by SQL Server")
        assert "React Native" in skills
        assert "SQL Server" in skills
        assert "React" not in skills
        assert "SQL" not in skills

    def test_tech_stack_list(self):
        skills = extract_skills("Tech stack: React, Node.js, MongoDB, Docker.")
        assert set(skills) == {"React", "Node.js", "MongoDB", "Docker"}

    def test_delimited_list_uses_known_aliases(self):
        # none of these spellings are in the pattern batteries
        skills = extract_skills("Tools: antd, psql, pyspark")
        assert skills == ["Ant Design", "PostgreSQL", "Spark"]

    def test_delimited_list_ignores_unknown_and_long_items(self):
        skills = extract_skills("Tools: antd, teamwork, a very long unknown item name goes here")
        assert skills == ["Ant Design"]

    def test_deduplicated(self):
        skills = extract_skills("Python, python, PYTHON and more Python")
        assert skills == ["Python"]

    def test_deterministic(self):
        text = "Requirements: Python, Django, AWS. Knowledge of Docker and Kubernetes."
        assert extract_skills(text) == extract_skills(text)

    def test_custom_taxonomy(self):
        taxonomy = SkillTaxonomy([SkillAlias(canonical="Docker Engine", aliases=("docker",))])
        assert extract_skills("Docker experience", taxonomy=taxonomy) == ["Docker Engine"]


def test_every_battery_term_is_known():
    taxonomy = get_taxonomy()
    unknown = [t for t in battery_terms() if not taxonomy.is_known(t)]
    assert unknown == []


class TestExtractWithExperience:
    def test_years_per_skill(self):
        result = extract_skills_with_experience(
            "5+ years of experience with Python. Minimum 3 years in Docker."
        )
        assert result == [
            SkillExperience(skill="Python", years_required=5),
            SkillExperience(skill="Docker", years_required=3),
        ]

    def test_keeps_largest_requirement(self):
        result = extract_skills_with_experience(
            "2 years of experience with Python and 4 years with Python."
        )
        assert result == [SkillExperience(skill="Python", years_required=4)]

    def test_implausible_years_discarded(self):
        assert extract_skills_with_experience("25 years of experience with Java.") == []
        assert extract_skills_with_experience("0 years with Java.") == []

    def test_bare_years_of(self):
        result = extract_skills_with_experience("Requires 3+ years of Python.")
        assert result == [SkillExperience(skill="Python", years_required=3)]

    def test_years_stay_within_their_sentence(self):
        result = extract_skills_with_experience(
            "5+ years of experience with Python. Familiarity with Docker is a plus."
        )
        assert result == [SkillExperience(skill="Python", years_required=5)]

    def test_dotted_names_in_years_clause(self):
        result = extract_skills_with_experience("3+ years of experience with Node.js.")
        assert result == [SkillExperience(skill="Node.js", years_required=3)]

    def test_ambiguous_word_in_years_clause(self):
        result = extract_skills_with_experience("3+ years of Go.")
        assert result == [SkillExperience(skill="Go", years_required=3)]

    def test_at_least(self):
        result = extract_skills_with_experience("At least 2 years of AWS.")
        assert result == [SkillExperience(skill="AWS", years_required=2)]

    @pytest.mark.parametrize("value", ["", None, 3.5])
    def test_empty_input(self, value):
        assert extract_skills_with_experience(value) == []


class TestRichness:
    @pytest.mark.parametrize("text, expected", [
        ("", 0),
        ("We value teamwork", 0),
        ("Python developer", 15),
        ("Python and Docker", 30),
        ("Python, Docker, React", 40),
        ("Python, Docker, React, AWS, Redis", 60),
        ("Python Docker React AWS Kubernetes Redis", 68),
        ("Python Docker React AWS Kubernetes Redis Django Flask Jenkins Terraform Ansible", 100),
    ])
    def test_tiers(self, text, expected):
        assert score_richness(text) == expected

    def test_never_exceeds_100(self):
        text = ", ".join([
            "Python", "Django", "Flask", "React", "Angular", "Docker", "Kubernetes",
            "AWS", "Azure", "Redis", "MongoDB", "MySQL", "Jenkins", "Terraform",
        ])
        assert score_richness(text) == 100


class TestCategorize:
    def test_groups_by_category(self):
        result = categorize_skills("React, Python, Docker, Figma and Scrum")
        assert result["frontend"] == ["React"]
        assert result["programming"] == ["Python"]
        assert result["devops"] == ["Docker"]
        assert result["design"] == ["Figma"]
        assert result["other"] == ["Scrum"]

    def test_all_keys_present(self):
        result = categorize_skills("")
        assert tuple(result) == CATEGORY_NAMES
        assert all(v == [] for v in result.values())
        assert len(result) == 9

    def test_first_category_wins(self):
        result = categorize_skills("Swift and Kotlin developer who also writes CSS")
        assert sorted(result["programming"]) == ["Kotlin", "Swift"]
        assert result["mobile"] == []
        assert result["frontend"] == ["CSS"]
        assert result["design"] == []
