"""
coldguard - usage guard, draft generator and compose links for cold outreach.

Quota checks:
    from coldguard import ColdEmailGuard

    guard = ColdEmailGuard()
    result = guard.check_permission("user_123", requested_credits=3)
    if result.allowed:
        guard.record_usage("user_123", credits_used=2)

Drafts (async, falls back to a template on any LLM failure):
    from coldguard import EmailGenerator, EmailGenerationOptions, LLMSettings, UserProfile

    generator = EmailGenerator(LLMSettings(api_key="sk-or-..."))
    draft = await generator.generate(EmailGenerationOptions(
        job_title="Data Engineer", company="Acme", user=UserProfile(full_name="Ada"),
    ))

Compose links:
    from coldguard import build_compose_url, ComposeOptions

    url = build_compose_url("gmail", ComposeOptions(to=["hr@acme.com"], subject=draft.subject, body=draft.body))
"""

from coldguard.config import (
    ColdEmailLimits,
    ColdEmailCosts,
    LLMSettings,
    Settings,
    DEFAULT_LIMITS,
    DEFAULT_COSTS,
    settings_from_env,
)
from coldguard.models import (
    UsageRecord,
    UsageStats,
    PermissionResult,
    DenialReason,
    ValidationResult,
    EmailDraft,
    DraftMetadata,
    DraftSource,
    UserProfile,
    Project,
    WorkExperience,
    EmailGenerationOptions,
    Tone,
    ComposeOptions,
    Provider,
)
from coldguard.errors import ColdGuardError, ComposeUrlError, GenerationError
from coldguard.storage import UsageLedger, InMemoryUsageLedger
from coldguard.cost import estimate_cost, estimate_model_cost
from coldguard.guard import ColdEmailGuard
from coldguard.validation import validate_email_content, validate_email_addresses
from coldguard.generator import EmailGenerator, generate_fallback_email
from coldguard.compose import (
    build_compose_url,
    build_mailto_url,
    deliverability_score,
    get_provider,
)
from coldguard.templates import render_template
from coldguard.metrics import MetricsCollector


__version__ = "0.1.0"
__all__ = [
    # Config
    "ColdEmailLimits",
    "ColdEmailCosts",
    "LLMSettings",
    "Settings",
    "DEFAULT_LIMITS",
    "DEFAULT_COSTS",
    "settings_from_env",
    # Models
    "UsageRecord",
    "UsageStats",
    "PermissionResult",
    "DenialReason",
    "ValidationResult",
    "EmailDraft",
    "DraftMetadata",
    "DraftSource",
    "UserProfile",
    "Project",
    "WorkExperience",
    "EmailGenerationOptions",
    "Tone",
    "ComposeOptions",
    "Provider",
    # Errors
    "ColdGuardError",
    "ComposeUrlError",
    "GenerationError",
    # Guard
    "ColdEmailGuard",
    "UsageLedger",
    "InMemoryUsageLedger",
    "estimate_cost",
    "estimate_model_cost",
    "validate_email_content",
    "validate_email_addresses",
    # Drafts
    "EmailGenerator",
    "generate_fallback_email",
    "render_template",
    # Compose
    "build_compose_url",
    "build_mailto_url",
    "deliverability_score",
    "get_provider",
    "MetricsCollector",
]
