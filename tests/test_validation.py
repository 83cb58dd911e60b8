"""Tests for content validation."""

from coldguard.config import ColdEmailLimits
from coldguard.validation import (
    find_spam_words,
    validate_email_addresses,
    validate_email_content,
)


class TestValidateEmailContent:
    """Test subject/body validation."""

    def test_valid_email(self):
        result = validate_email_content("Backend role at Acme", "Hi, I'd love to chat.")

        assert result.valid is True
        assert result.errors == []

    def test_empty_subject(self):
        result = validate_email_content("", "valid body")

        assert result.valid is False
        assert "Subject is required" in result.errors

    def test_whitespace_subject(self):
        result = validate_email_content("   ", "valid body")

        assert "Subject is required" in result.errors

    def test_empty_body(self):
        result = validate_email_content("ok subject", "\n\t ")

        assert result.errors == ["Email body is required"]

    def test_body_too_long_cites_counts(self):
        result = validate_email_content("ok subject", "x" * 1401)

        assert result.valid is False
        assert result.errors == ["Body too long (1401/1400 chars)"]

    def test_subject_too_long(self):
        result = validate_email_content("s" * 61, "body")

        assert result.errors == ["Subject too long (61/60 chars)"]

    def test_body_at_limit_is_valid(self):
        assert validate_email_content("ok subject", "x" * 1400).valid is True

    def test_custom_limits(self):
        limits = ColdEmailLimits(max_subject_length=10, max_body_length=20)

        result = validate_email_content("short", "y" * 21, limits)

        assert result.errors == ["Body too long (21/20 chars)"]

    def test_spam_words_reported_once_each(self):
        """Spam words in subject or body each yield one advisory error."""
        result = validate_email_content("URGENT: hello", "Totally free, act now. Free!")

        assert result.valid is False
        assert result.errors == [
            'Avoid spam words like "urgent" to improve deliverability',
            'Avoid spam words like "free" to improve deliverability',
            'Avoid spam words like "act now" to improve deliverability',
        ]

    def test_errors_accumulate(self):
        result = validate_email_content("", "")

        assert len(result.errors) == 2


class TestFindSpamWords:
    def test_case_insensitive_substring(self):
        assert find_spam_words("A GUARANTEEd win for a Limited Time") == [
            "guarantee",
            "limited time",
        ]

    def test_clean_text(self):
        assert find_spam_words("Quick question about the data role") == []


class TestValidateEmailAddresses:
    """Test recipient address checks."""

    def test_split(self):
        valid, invalid = validate_email_addresses(
            [" hr@acme.com ", "not-an-email", "a@b", "jane.doe@corp.co.uk"]
        )

        assert valid == ["hr@acme.com", "jane.doe@corp.co.uk"]
        assert invalid == ["not-an-email", "a@b"]

    def test_empty(self):
        assert validate_email_addresses([]) == ([], [])
