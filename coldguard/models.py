"""Shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime, UTC
from enum import Enum
from typing import Optional, Union


@dataclass
class UsageRecord:
    """Per-user usage counters.

    ``credits_used_today`` and ``credits_used_this_month`` reset on their own
    schedules, so today's count is not guaranteed to be <= the month's.
    """
    user_id: str
    credits_used_today: int = 0
    credits_used_this_month: int = 0
    emails_sent_today: int = 0
    last_activity_at: Optional[datetime] = None
    rate_limit_attempts: int = 0
    rate_limit_window_start: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("last_activity_at", "rate_limit_window_start"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


class DenialReason(str, Enum):
    """Why a permission check failed."""
    RATE_LIMITED = "rate limit exceeded"
    DAILY_CREDITS = "daily credit limit exceeded"
    MONTHLY_CREDITS = "monthly credit limit exceeded"
    DAILY_EMAILS = "daily email limit exceeded"


@dataclass
class PermissionResult:
    """Outcome of a permission check. Denials are values, not exceptions."""
    allowed: bool
    reason: Optional[DenialReason] = None
    suggested_action: Optional[str] = None
    retry_after_seconds: Optional[int] = None

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value if self.reason else None,
            "suggested_action": self.suggested_action,
            "retry_after_seconds": self.retry_after_seconds,
        }


@dataclass
class UsageStats:
    """A usage record plus what is left under the configured limits."""
    usage: UsageRecord
    remaining_credits_today: int
    remaining_credits_this_month: int
    remaining_emails_today: int
    estimated_cost_today: float
    estimated_cost_this_month: float

    def to_dict(self) -> dict:
        return {
            **self.usage.to_dict(),
            "remaining_credits_today": self.remaining_credits_today,
            "remaining_credits_this_month": self.remaining_credits_this_month,
            "remaining_emails_today": self.remaining_emails_today,
            "estimated_cost_today": self.estimated_cost_today,
            "estimated_cost_this_month": self.estimated_cost_this_month,
        }


@dataclass
class ValidationResult:
    """Content validation outcome."""
    valid: bool
    errors: list[str] = field(default_factory=list)


class DraftSource(str, Enum):
    """How a draft's subject and body were obtained."""
    PARSED = "parsed"
    REPAIRED = "repaired"
    FALLBACK = "fallback"


FALLBACK_MODEL = "fallback"


@dataclass(frozen=True)
class DraftMetadata:
    model: str
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    tokens_used: Optional[int] = None
    source: DraftSource = DraftSource.PARSED


@dataclass(frozen=True)
class EmailDraft:
    """A generated subject and body, pending review by the user."""
    subject: str
    body: str
    metadata: DraftMetadata

    @property
    def is_fallback(self) -> bool:
        return self.metadata.model == FALLBACK_MODEL

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "body": self.body,
            "metadata": {
                "model": self.metadata.model,
                "tokens_used": self.metadata.tokens_used,
                "generated_at": self.metadata.generated_at.isoformat(),
                "source": self.metadata.source.value,
            },
        }


@dataclass
class Project:
    name: str
    description: Optional[str] = None
    technologies: Optional[str] = None
    impact: Optional[str] = None


@dataclass
class WorkExperience:
    company: str
    position: str
    start_year: Optional[int] = None
    end_year: Optional[int] = None  # None means current role
    description: Optional[str] = None


@dataclass
class UserProfile:
    """The candidate the email is written for."""
    full_name: str
    title: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: list[Union[str, dict]] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    work_experiences: list[WorkExperience] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """Build a profile from loosely shaped JSON (API payloads, fixtures)."""
        return cls(
            full_name=data.get("full_name") or "",
            title=data.get("title"),
            email=data.get("email"),
            location=data.get("location"),
            bio=data.get("bio"),
            skills=list(data.get("skills") or []),
            projects=[
                p if isinstance(p, Project) else Project(**p)
                for p in data.get("projects") or []
            ],
            work_experiences=[
                w if isinstance(w, WorkExperience) else WorkExperience(**w)
                for w in data.get("work_experiences") or []
            ],
        )


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    WARM = "warm"
    CONCISE = "concise"
    ENTHUSIASTIC = "enthusiastic"


@dataclass
class EmailGenerationOptions:
    """Inputs for one draft."""
    job_title: str
    company: str
    user: UserProfile
    company_url: Optional[str] = None
    job_location: Optional[str] = None
    tone: Tone = Tone.PROFESSIONAL
    include_resume: bool = True
    model: Optional[str] = None  # overrides LLMSettings.model


class Provider(str, Enum):
    """Compose targets."""
    GMAIL = "gmail"
    OUTLOOK = "outlook"
    YAHOO = "yahoo"
    MAILTO = "mailto"


@dataclass
class ComposeOptions:
    to: list[str]
    subject: str = ""
    body: str = ""
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    account_index: int = 0  # Gmail multi-account slot
