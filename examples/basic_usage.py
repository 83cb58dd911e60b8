"""
Basic usage examples for coldguard.

Walks one outreach attempt through the guard, the draft generator and the
compose-link builder.
"""

import asyncio

from coldguard import (
    ColdEmailGuard,
    ComposeOptions,
    ComposeUrlError,
    EmailGenerationOptions,
    EmailGenerator,
    LLMSettings,
    MetricsCollector,
    Project,
    UserProfile,
    build_compose_url,
    deliverability_score,
    render_template,
)


PROFILE = UserProfile(
    full_name="Ada Lovelace",
    title="Data Engineer",
    email="ada@example.com",
    skills=["Python", "SQL", "Airflow"],
    projects=[Project(name="Ledger", impact="cut reconciliation time by 40%")],
)


def example_quota():
    """Check before spending, record after."""
    print("=" * 60)
    print("Example 1: Quota Guard")
    print("=" * 60)

    guard = ColdEmailGuard()

    for attempt in range(6):
        result = guard.check_permission("user_123", requested_credits=2)
        if not result.allowed:
            print(f"Attempt {attempt + 1}: denied ({result.reason.value})")
            print(f"  {result.suggested_action}")
            break
        guard.record_usage("user_123", credits_used=2)
        print(f"Attempt {attempt + 1}: allowed")

    stats = guard.get_usage_stats("user_123")
    print(f"Credits left today: {stats.remaining_credits_today}")
    print(f"Estimated cost today: ${stats.estimated_cost_today:.4f}")
    print()


def example_draft():
    """Generate a draft. Without an API key this is the template draft."""
    print("=" * 60)
    print("Example 2: Draft Generation")
    print("=" * 60)

    # Set api_key to call the model through OpenRouter
    generator = EmailGenerator(LLMSettings(api_key=None))
    draft = asyncio.run(generator.generate(EmailGenerationOptions(
        job_title="Platform Engineer",
        company="Acme",
        user=PROFILE,
    )))

    print(f"Subject: {draft.subject}")
    print(draft.body)
    print(f"Model: {draft.metadata.model} (fallback={draft.is_fallback})")
    print()
    return draft


def example_compose(draft):
    """Turn a draft into compose links and score it."""
    print("=" * 60)
    print("Example 3: Compose Links")
    print("=" * 60)

    options = ComposeOptions(to=["hiring@acme.example"], subject=draft.subject, body=draft.body)
    metrics = MetricsCollector()

    for provider in ("gmail", "outlook", "yahoo", "mailto"):
        url = build_compose_url(provider, options)
        metrics.record_compose(provider, len(url))
        print(f"{provider}: {len(url)} chars")

    score = deliverability_score(draft.subject, draft.body, options.to)
    print(f"Deliverability score: {score}/100")

    try:
        build_compose_url("gmail", ComposeOptions(to=[]))
    except ComposeUrlError as e:
        print(f"Compose error caught: {e}")

    print(f"Counters: {metrics.counters}")
    print()


def example_template():
    """Fill a hand-written template."""
    print("=" * 60)
    print("Example 4: Templates")
    print("=" * 60)

    rendered = render_template("informational", "friendly", {
        "recipientName": "Grace",
        "recipientTitle": "Staff Engineer",
        "companyName": "Acme",
        "senderName": PROFILE.full_name,
        "senderTitle": PROFILE.title,
    })
    print(f"Subject: {rendered.subject}")
    print(rendered.body)
    print()


if __name__ == "__main__":
    example_quota()
    draft = example_draft()
    example_compose(draft)
    example_template()

    print("All examples completed!")
