"""
Compose URL builder.

Renders a deep link that opens a webmail compose window (Gmail, Outlook,
Yahoo) with recipients, subject and body pre-filled, or a ``mailto:`` URI
as the universal fallback. Also scores drafts for spam-filter risk.

All builders are pure: same input, same URL.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote, urlencode

from coldguard.errors import ComposeUrlError
from coldguard.models import ComposeOptions, Provider


MAX_URL_LENGTH = 8192
MAX_SUBJECT_LENGTH_FOR_URL = 200
MAX_BODY_LENGTH_FOR_URL = 1800
MAX_BODY_LENGTH_FOR_MAILTO = 1000
ELLIPSIS = "..."


@dataclass(frozen=True)
class ProviderSpec:
    """How one provider names its compose fields."""
    provider: Provider
    display_name: str
    base_url: str
    subject_param: str
    recipient_separator: str
    max_body_length: int
    fixed_params: tuple = ()

    def url_for(self, account_index: int) -> str:
        return self.base_url.format(account=account_index)


PROVIDERS: dict[Provider, ProviderSpec] = {
    Provider.GMAIL: ProviderSpec(
        provider=Provider.GMAIL,
        display_name="Gmail",
        base_url="https://mail.google.com/mail/u/{account}/",
        subject_param="su",
        recipient_separator=",",
        max_body_length=MAX_BODY_LENGTH_FOR_URL,
        fixed_params=(("fs", "1"), ("tf", "cm")),  # full screen, compose mode
    ),
    Provider.OUTLOOK: ProviderSpec(
        provider=Provider.OUTLOOK,
        display_name="Outlook",
        base_url="https://outlook.live.com/mail/0/deeplink/compose",
        subject_param="subject",
        recipient_separator=";",
        max_body_length=MAX_BODY_LENGTH_FOR_URL,
    ),
    Provider.YAHOO: ProviderSpec(
        provider=Provider.YAHOO,
        display_name="Yahoo Mail",
        base_url="https://compose.mail.yahoo.com/",
        subject_param="subject",
        recipient_separator=",",
        max_body_length=MAX_BODY_LENGTH_FOR_URL,
    ),
    Provider.MAILTO: ProviderSpec(
        provider=Provider.MAILTO,
        display_name="Email app",
        base_url="mailto:",
        subject_param="subject",
        recipient_separator=",",
        max_body_length=MAX_BODY_LENGTH_FOR_MAILTO,
    ),
}


def get_provider(name: Union[str, Provider]) -> Optional[ProviderSpec]:
    """Find a provider by enum, id ("gmail") or display name ("Yahoo Mail")."""
    if isinstance(name, Provider):
        return PROVIDERS[name]
    wanted = name.strip().lower()
    for spec in PROVIDERS.values():
        if wanted in (spec.provider.value, spec.display_name.lower()):
            return spec
    return None


def sanitize_email(address: str) -> str:
    return address.strip().lower()


def sanitize_addresses(addresses: Optional[list[str]]) -> list[str]:
    """Trimmed, lowercased addresses with blanks dropped."""
    return [a for a in (sanitize_email(x) for x in addresses or []) if a]


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Normalize text for a URL parameter.

    CRLF and lone CR become LF, runs of three or more newlines collapse to
    two, and the result is trimmed. Text longer than ``max_length`` is cut
    and ends with "...".
    """
    sanitized = text.replace("\r\n", "\n").replace("\r", "\n")
    sanitized = re.sub(r"\n{3,}", "\n\n", sanitized).strip()

    if max_length is not None and len(sanitized) > max_length:
        sanitized = sanitized[: max_length - len(ELLIPSIS)] + ELLIPSIS

    return sanitized


def _check_length(url: str) -> str:
    if len(url) > MAX_URL_LENGTH:
        raise ComposeUrlError(
            f"Generated URL too long: {len(url)} chars (max {MAX_URL_LENGTH})",
            length=len(url),
            max_length=MAX_URL_LENGTH,
        )
    return url


def _prepare(options: ComposeOptions, spec: ProviderSpec):
    to = sanitize_addresses(options.to)
    if not to:
        raise ComposeUrlError("At least one recipient is required")
    cc = sanitize_addresses(options.cc)
    bcc = sanitize_addresses(options.bcc)
    subject = sanitize_text(options.subject or "", MAX_SUBJECT_LENGTH_FOR_URL)
    body = sanitize_text(options.body or "", spec.max_body_length)
    return to, cc, bcc, subject, body


def build_compose_url(
    provider: Union[str, Provider],
    options: ComposeOptions,
) -> str:
    """
    Build a compose URL for ``provider``.

    Empty fields are left out of the query string entirely.

    Raises:
        ComposeUrlError: Unknown provider, no recipients, or URL longer
            than MAX_URL_LENGTH after truncation
    """
    spec = get_provider(provider)
    if spec is None:
        raise ComposeUrlError(f"Unknown email provider: {provider}")
    if spec.provider is Provider.MAILTO:
        return build_mailto_url(options)

    to, cc, bcc, subject, body = _prepare(options, spec)
    sep = spec.recipient_separator

    params = list(spec.fixed_params)
    params.append(("to", sep.join(to)))
    if cc:
        params.append(("cc", sep.join(cc)))
    if bcc:
        params.append(("bcc", sep.join(bcc)))
    if subject:
        params.append((spec.subject_param, subject))
    if body:
        params.append(("body", body))

    url = f"{spec.url_for(options.account_index)}?{urlencode(params)}"
    return _check_length(url)


def build_mailto_url(options: ComposeOptions) -> str:
    """
    Build a ``mailto:`` URI.

    The body is capped more tightly than for webmail, and spaces are
    percent-encoded since mail clients do not read "+" as a space.
    """
    spec = PROVIDERS[Provider.MAILTO]
    to, cc, bcc, subject, body = _prepare(options, spec)

    params = []
    if cc:
        params.append(("cc", ",".join(cc)))
    if bcc:
        params.append(("bcc", ",".join(bcc)))
    if subject:
        params.append(("subject", subject))
    if body:
        params.append(("body", body))

    url = "mailto:" + ",".join(quote(addr, safe="@") for addr in to)
    if params:
        url += "?" + urlencode(params, quote_via=quote)
    return _check_length(url)


# =============================================================================
# Deliverability
# =============================================================================

DELIVERABILITY_SPAM_WORDS = (
    "urgent", "free", "guarantee", "limited time", "act now", "exclusive",
    "amazing", "incredible", "unbelievable", "winner", "congratulations",
)


def deliverability_score(subject: str, body: str, recipients: list[str]) -> int:
    """
    Heuristic 0-100 estimate of how likely a draft is to land in the inbox.

    Starts at 100 and subtracts:
        10 per spam word in the subject
        5 for a subject over 60 chars, 10 for one under 10 chars
        10 for a body over 2000 chars, 15 for one under 100 chars
        20 when over 30% of the body's letters are capitals
        10 for more than 3 exclamation marks in the body
        15 for more than 5 recipients
    """
    score = 100

    subject_lower = subject.lower()
    for word in DELIVERABILITY_SPAM_WORDS:
        if word in subject_lower:
            score -= 10

    if len(subject) > 60:
        score -= 5
    if len(subject) < 10:
        score -= 10

    if len(body) > 2000:
        score -= 10
    if len(body) < 100:
        score -= 15

    letters = re.findall(r"[a-zA-Z]", body)
    capitals = [c for c in letters if c.isupper()]
    if letters and len(capitals) / len(letters) > 0.3:
        score -= 20

    if body.count("!") > 3:
        score -= 10

    if len(recipients) > 5:
        score -= 15

    return max(0, min(100, score))
