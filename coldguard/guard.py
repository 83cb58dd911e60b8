"""
Quota guard for the cold email feature.

"Never let a user burn through the enrichment budget."

Features:
- Per-user daily and monthly credit caps
- Daily email cap
- Fixed-window rate limiting
- Usage stats with cost estimates
- Content validation
"""

import logging
from datetime import datetime, UTC
from typing import Callable, Optional

from coldguard.config import ColdEmailLimits, ColdEmailCosts, DEFAULT_LIMITS, DEFAULT_COSTS
from coldguard.cost import estimate_cost
from coldguard.metrics import MetricsCollector
from coldguard.models import (
    DenialReason,
    PermissionResult,
    UsageRecord,
    UsageStats,
    ValidationResult,
)
from coldguard.rollover import (
    is_new_day,
    is_new_month,
    is_new_rate_window,
    rate_window_remaining,
)
from coldguard.storage import InMemoryUsageLedger, UsageLedger
from coldguard.validation import validate_email_content


logger = logging.getLogger(__name__)

DEFAULT_REQUESTED_CREDITS = 3


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ColdEmailGuard:
    """
    Decides whether a user may run another contact search / draft, and
    records what they used.

    Example:
        ```python
        guard = ColdEmailGuard()

        result = guard.check_permission("user_123", requested_credits=3)
        if result.allowed:
            ...  # search contacts, generate a draft
            guard.record_usage("user_123", credits_used=2)

        stats = guard.get_usage_stats("user_123")
        print(stats.remaining_credits_today)
        ```
    """

    def __init__(
        self,
        limits: ColdEmailLimits = DEFAULT_LIMITS,
        costs: ColdEmailCosts = DEFAULT_COSTS,
        ledger: Optional[UsageLedger] = None,
        clock: Callable[[], datetime] = _utcnow,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Args:
            limits: Caps applied to every user.
            costs: Unit prices for cost estimates.
            ledger: Where usage records live. Defaults to a fresh in-memory ledger.
            clock: Returns the current time. Calendar days and months are
                   taken from its timezone.
            metrics: Optional collector for decisions and usage.
        """
        self.limits = limits
        self.costs = costs
        self.ledger = ledger if ledger is not None else InMemoryUsageLedger()
        self._clock = clock
        self._metrics = metrics

    # =========================================================================
    # Permission checks
    # =========================================================================

    def check_permission(
        self,
        user_id: str,
        requested_credits: int = DEFAULT_REQUESTED_CREDITS,
    ) -> PermissionResult:
        """
        Check whether ``user_id`` may spend ``requested_credits`` now.

        Read-only: calling it any number of times changes nothing. Counters
        from an earlier day or month are treated as zero.

        Checks run in order and the first failure wins: rate limit, daily
        credits, monthly credits, daily emails.
        """
        now = self._clock()
        usage = self._roll_over(self.ledger.get(user_id), now)
        result = self._evaluate(usage, requested_credits, now)
        self._report(user_id, result, requested_credits)
        return result

    # Name used by the web layer.
    can_perform_search = check_permission

    def _evaluate(
        self,
        usage: UsageRecord,
        requested_credits: int,
        now: datetime,
    ) -> PermissionResult:
        limits = self.limits

        if self._is_rate_limited(usage, now):
            wait = rate_window_remaining(
                usage.rate_limit_window_start, now, limits.rate_limit_window
            )
            return PermissionResult(
                allowed=False,
                reason=DenialReason.RATE_LIMITED,
                suggested_action=f"Please wait {wait} seconds before trying again",
                retry_after_seconds=wait,
            )

        if usage.credits_used_today + requested_credits > limits.max_credits_per_day:
            return PermissionResult(
                allowed=False,
                reason=DenialReason.DAILY_CREDITS,
                suggested_action=(
                    f"Daily limit: {limits.max_credits_per_day} credits. Try again tomorrow."
                ),
            )

        if usage.credits_used_this_month + requested_credits > limits.max_credits_per_user:
            return PermissionResult(
                allowed=False,
                reason=DenialReason.MONTHLY_CREDITS,
                suggested_action=(
                    f"Monthly limit: {limits.max_credits_per_user} credits. "
                    "Upgrade your plan for more."
                ),
            )

        if usage.emails_sent_today >= limits.max_emails_per_day:
            return PermissionResult(
                allowed=False,
                reason=DenialReason.DAILY_EMAILS,
                suggested_action=(
                    f"Daily limit: {limits.max_emails_per_day} emails. Try again tomorrow."
                ),
            )

        return PermissionResult(allowed=True)

    def _is_rate_limited(self, usage: UsageRecord, now: datetime) -> bool:
        if usage.rate_limit_window_start is None:
            return False
        if is_new_rate_window(usage.rate_limit_window_start, now, self.limits.rate_limit_window):
            return False
        return usage.rate_limit_attempts >= self.limits.rate_limit_requests

    def _report(self, user_id: str, result: PermissionResult, requested_credits: int) -> None:
        if not result.allowed:
            logger.info(
                "Cold email denied for user %s: %s", user_id, result.reason.value
            )
        if self._metrics:
            self._metrics.record_permission(
                user_id,
                result.allowed,
                result.reason.value if result.reason else None,
                requested_credits,
            )

    # =========================================================================
    # Usage recording
    # =========================================================================

    def record_usage(self, user_id: str, credits_used: int) -> UsageRecord:
        """
        Record one attempt that spent ``credits_used`` credits.

        Day and month counters are reset first when the last activity was
        on an earlier day or month. Returns a snapshot of the new record.
        """
        with self.ledger.lock(user_id):
            usage = self._apply(self.ledger.get(user_id), credits_used, self._clock())
            self.ledger.save(usage)

        logger.debug(
            "Recorded %d credits for user %s (today=%d, month=%d)",
            credits_used,
            user_id,
            usage.credits_used_today,
            usage.credits_used_this_month,
        )
        if self._metrics:
            self._metrics.record_usage(user_id, credits_used)
        return usage

    # Name used by the web layer.
    record_attempt = record_usage

    def check_and_record(
        self,
        user_id: str,
        credits_used: int,
    ) -> PermissionResult:
        """
        Check and record in one step, under the user's lock.

        Use this when concurrent requests for the same user can race between
        ``check_permission`` and ``record_usage``. Nothing is recorded when
        the check fails.
        """
        with self.ledger.lock(user_id):
            now = self._clock()
            usage = self._roll_over(self.ledger.get(user_id), now)
            result = self._evaluate(usage, credits_used, now)
            if result.allowed:
                self.ledger.save(self._apply(usage, credits_used, now))

        self._report(user_id, result, credits_used)
        if result.allowed and self._metrics:
            self._metrics.record_usage(user_id, credits_used)
        return result

    @staticmethod
    def _roll_over(usage: UsageRecord, now: datetime) -> UsageRecord:
        """Zero the day and month counters when ``now`` is past their window."""
        if is_new_day(usage.last_activity_at, now):
            usage.credits_used_today = 0
            usage.emails_sent_today = 0

        if is_new_month(usage.last_activity_at, now):
            usage.credits_used_this_month = 0

        return usage

    def _apply(self, usage: UsageRecord, credits_used: int, now: datetime) -> UsageRecord:
        usage = self._roll_over(usage, now)

        usage.credits_used_today += credits_used
        usage.credits_used_this_month += credits_used
        usage.emails_sent_today += 1
        usage.last_activity_at = now

        if is_new_rate_window(usage.rate_limit_window_start, now, self.limits.rate_limit_window):
            usage.rate_limit_attempts = 1
            usage.rate_limit_window_start = now
        else:
            usage.rate_limit_attempts += 1

        return usage

    # =========================================================================
    # Reporting
    # =========================================================================

    def estimate_cost(self, credits_used: int, tokens_used: Optional[int] = None) -> float:
        """Estimated USD cost using this guard's prices."""
        return estimate_cost(credits_used, tokens_used, self.costs)

    def get_usage_stats(self, user_id: str) -> UsageStats:
        """
        Current record for ``user_id`` with remaining allowances and cost.

        Counters from an earlier day or month read as zero.
        """
        usage = self._roll_over(self.ledger.get(user_id), self._clock())
        limits = self.limits
        return UsageStats(
            usage=usage,
            remaining_credits_today=max(0, limits.max_credits_per_day - usage.credits_used_today),
            remaining_credits_this_month=max(
                0, limits.max_credits_per_user - usage.credits_used_this_month
            ),
            remaining_emails_today=max(0, limits.max_emails_per_day - usage.emails_sent_today),
            estimated_cost_today=self.estimate_cost(usage.credits_used_today),
            estimated_cost_this_month=self.estimate_cost(usage.credits_used_this_month),
        )

    def validate_email(self, subject: str, body: str) -> ValidationResult:
        """Validate content against this guard's subject/body limits."""
        return validate_email_content(subject, body, self.limits)

    def reset_user(self, user_id: str) -> bool:
        """Forget a user's usage. Returns True if a record existed."""
        return self.ledger.remove(user_id)
