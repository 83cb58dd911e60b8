"""
Content validation for outreach emails.

Validation never raises: it reports a list of problems and leaves the
block-or-warn decision to the caller.
"""

import re

from coldguard.config import ColdEmailLimits, DEFAULT_LIMITS
from coldguard.models import ValidationResult


SPAM_WORDS = ("urgent", "free", "guarantee", "limited time", "act now")

EMAIL_ADDRESS_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def find_spam_words(text: str, words=SPAM_WORDS) -> list[str]:
    """Spam words contained in ``text``, case-insensitively, in list order."""
    lowered = text.lower()
    return [word for word in words if word in lowered]


def validate_email_content(
    subject: str,
    body: str,
    limits: ColdEmailLimits = DEFAULT_LIMITS,
) -> ValidationResult:
    """
    Check a subject and body against length limits and the spam word list.

    Args:
        subject: Email subject
        body: Email body
        limits: Supplies max_subject_length and max_body_length

    Returns:
        ValidationResult; ``valid`` is True only when no errors were found.
        Spam word hits are reported as errors too.
    """
    errors = []

    if not subject.strip():
        errors.append("Subject is required")
    elif len(subject) > limits.max_subject_length:
        errors.append(
            f"Subject too long ({len(subject)}/{limits.max_subject_length} chars)"
        )

    if not body.strip():
        errors.append("Email body is required")
    elif len(body) > limits.max_body_length:
        errors.append(
            f"Body too long ({len(body)}/{limits.max_body_length} chars)"
        )

    combined = f"{subject}\n{body}"
    for word in find_spam_words(combined):
        errors.append(f'Avoid spam words like "{word}" to improve deliverability')

    return ValidationResult(valid=not errors, errors=errors)


def validate_email_addresses(addresses: list[str]) -> tuple[list[str], list[str]]:
    """Split trimmed addresses into (valid, invalid) lists."""
    valid, invalid = [], []
    for address in addresses:
        cleaned = address.strip()
        if EMAIL_ADDRESS_RE.match(cleaned):
            valid.append(cleaned)
        else:
            invalid.append(cleaned)
    return valid, invalid
