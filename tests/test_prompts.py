"""Tests for prompt construction and output parsing."""

import pytest

from coldguard.models import (
    DraftSource,
    EmailGenerationOptions,
    Project,
    Tone,
    UserProfile,
    WorkExperience,
)
from coldguard.parsing import parse_draft_json, repair_truncated_json
from coldguard.prompts import (
    CALL_TO_ACTION,
    NO_FOLLOW_UP,
    REFERRAL_ASK,
    RESUME_OFFER,
    build_email_prompt,
    format_experience,
    format_projects,
    format_skills,
)


@pytest.fixture
def profile():
    return UserProfile(
        full_name="Ada Lovelace",
        title="Data Engineer",
        skills=["Python", "SQL", "python", {"skill_name": "Airflow"}],
        projects=[
            Project(name="Ledger", technologies="Postgres", impact="cut costs 30%"),
            Project(name="Pipeline", description="Moved batch jobs to streaming"),
            Project(name="Third"),
        ],
        work_experiences=[
            WorkExperience(company="Old Co", position="Analyst", end_year=2019),
            WorkExperience(company="Now Inc", position="Data Engineer", end_year=None),
            WorkExperience(company="Mid LLC", position="Developer", end_year=2022),
        ],
    )


class TestFormatting:
    """Test profile formatting helpers."""

    def test_skills_deduplicated_in_order(self, profile):
        assert format_skills(profile.skills) == "Python, SQL, Airflow"

    def test_skills_capped_at_eight(self):
        skills = [f"skill{i}" for i in range(12)]

        assert format_skills(skills).count(",") == 7

    def test_no_skills(self):
        assert format_skills([]) == ""
        assert format_skills(None) == ""

    def test_projects_first_two(self, profile):
        lines = format_projects(profile.projects).split("\n")

        assert lines == [
            "• Ledger (Postgres): cut costs 30%",
            "• Pipeline: Moved batch jobs to streaming",
        ]

    def test_experience_most_recent_first(self, profile):
        """A role with no end year counts as current."""
        assert format_experience(profile.work_experiences) == (
            "• Data Engineer at Now Inc\n• Developer at Mid LLC"
        )


class TestBuildEmailPrompt:
    """Test the prompt text."""

    def test_contains_job_and_profile(self, profile):
        options = EmailGenerationOptions(
            job_title="Platform Engineer",
            company="Acme",
            user=profile,
            company_url="https://acme.example",
            job_location="Remote",
        )

        prompt = build_email_prompt(options)

        assert '"Platform Engineer" position (Remote)' in prompt
        assert "Acme (https://acme.example)" in prompt
        assert "Skills: Python, SQL, Airflow" in prompt
        assert "Max 60 characters" in prompt
        assert "Max 1400 characters" in prompt
        assert CALL_TO_ACTION in prompt
        assert REFERRAL_ASK in prompt
        assert NO_FOLLOW_UP in prompt
        assert prompt.rstrip().endswith("}")

    def test_tone_and_resume_options(self, profile):
        options = EmailGenerationOptions(
            job_title="Engineer",
            company="Acme",
            user=profile,
            tone=Tone.WARM,
            include_resume=False,
        )

        prompt = build_email_prompt(options)

        assert "Tone: warm" in prompt
        assert RESUME_OFFER not in prompt

    def test_minimal_profile(self):
        options = EmailGenerationOptions(
            job_title="Engineer", company="Acme", user=UserProfile(full_name="")
        )

        prompt = build_email_prompt(options)

        assert "Name: Job Applicant" in prompt
        assert "Skills:" not in prompt
        assert "Key Projects:" not in prompt


class TestParseDraftJson:
    """Test tagged parsing of model output."""

    def test_clean_json(self):
        result = parse_draft_json('{"subject": "Hi", "body": "Hello"}')

        assert result.source == DraftSource.PARSED
        assert result.content == {"subject": "Hi", "body": "Hello"}
        assert result.ok

    def test_truncated_json_repaired(self):
        result = parse_draft_json('{"subject": "Hi", "body": "Hello",')

        assert result.source == DraftSource.REPAIRED
        assert result.content == {"subject": "Hi", "body": "Hello"}

    def test_unrepairable(self):
        result = parse_draft_json("Sure! Here is your email: Subject: Hi")

        assert result.source == DraftSource.FALLBACK
        assert not result.ok
        assert result.error

    def test_cut_inside_string_fails(self):
        """Cutting back to the last quote can still leave invalid JSON."""
        result = parse_draft_json('{"subject": "Hi", "body": "Hel')

        assert result.source == DraftSource.FALLBACK

    def test_non_object(self):
        assert parse_draft_json('["subject", "body"]').source == DraftSource.FALLBACK

    def test_empty(self):
        assert parse_draft_json("").source == DraftSource.FALLBACK
        assert parse_draft_json(None).source == DraftSource.FALLBACK


class TestRepairTruncatedJson:
    def test_appends_brace_after_last_quote(self):
        assert repair_truncated_json('{"a": "b", ') == '{"a": "b"}'

    def test_not_applicable(self):
        assert repair_truncated_json('{"a": "b"}') is None
        assert repair_truncated_json("plain text") is None
        assert repair_truncated_json("{") is None
