"""
Draft generation for cold emails.

Calls an OpenAI-compatible chat-completion endpoint (OpenRouter by default)
once per draft. Any failure on that path, including a timeout or output that
cannot be parsed or breaks the length contract, falls back to a template
draft built from the profile alone, so ``generate`` always returns a draft.
"""

import asyncio
import logging
import re
import time
from datetime import datetime, UTC
from typing import Callable, Optional

from openai import AsyncOpenAI

from coldguard.config import LLMSettings
from coldguard.errors import GenerationError
from coldguard.metrics import MetricsCollector
from coldguard.models import (
    DraftMetadata,
    DraftSource,
    EmailDraft,
    EmailGenerationOptions,
    FALLBACK_MODEL,
    UserProfile,
)
from coldguard.parsing import parse_draft_json
from coldguard.prompts import (
    CALL_TO_ACTION,
    NO_FOLLOW_UP,
    REFERRAL_ASK,
    build_email_prompt,
)


logger = logging.getLogger(__name__)

MAX_SUBJECT_LENGTH = 60
MAX_BODY_LENGTH = 1400

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_ANY_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def clean_text(text: str) -> str:
    """Normalize line endings and drop control characters other than tab and newline."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_CHARS.sub("", text).strip()


def clean_line(text: str) -> str:
    """Single-line text: every control character, CR/LF and tab included, becomes a space."""
    return " ".join(_ANY_CONTROL.sub(" ", text).split())


def extract_draft_fields(
    content: dict,
    max_subject_length: int = MAX_SUBJECT_LENGTH,
    max_body_length: int = MAX_BODY_LENGTH,
) -> tuple[str, str]:
    """
    Pull subject and body out of parsed model output.

    Raises:
        GenerationError: If either field is missing or too long
    """
    subject = clean_line(str(content.get("subject") or ""))
    body = clean_text(str(content.get("body") or ""))

    if not subject or not body:
        raise GenerationError("Missing subject or body in generated email")
    if len(subject) > max_subject_length:
        raise GenerationError(
            f"Subject too long: {len(subject)} chars (max {max_subject_length})"
        )
    if len(body) > max_body_length:
        raise GenerationError(
            f"Body too long: {len(body)} chars (max {max_body_length})"
        )
    return subject, body


def _signature_name(user: UserProfile) -> str:
    return clean_line(user.full_name or "") or "Job Applicant"


def add_signature(body: str, user: UserProfile, max_body_length: int = MAX_BODY_LENGTH) -> str:
    """
    Append a sign-off block.

    Falls back to a one-line ``— Name`` signature whenever the full block
    would push the body past ``max_body_length``.
    """
    name = _signature_name(user)
    title = clean_line(user.title or "")
    email = clean_line(user.email or "")
    signature = f"\n\nBest regards,\n{name}"
    if title:
        signature += f"\n{title}"
    if email:
        signature += f"\n{email}"

    if len(body) + len(signature) > max_body_length:
        return f"{body}\n\n— {name}"
    return body + signature


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 3)].rstrip() + "..."


def generate_fallback_email(
    options: EmailGenerationOptions,
    clock: Callable[[], datetime] = _utcnow,
) -> EmailDraft:
    """
    Template draft built from the profile and job fields, without any I/O.

    Missing fields are replaced with neutral placeholders, and the result
    always fits the 60/1400 subject/body limits.
    """
    user = options.user
    job_title = clean_line(options.job_title or "") or "open role"
    company = clean_line(options.company or "") or "your company"
    background = clean_line(user.title or "") or "software development"

    subject = _truncate(f"Application for {job_title} at {company}", MAX_SUBJECT_LENGTH)

    paragraphs = [
        "Hi there,",
        f"I'm reaching out regarding the {job_title} position at {company}. "
        f"With my background in {background}, I believe I could contribute "
        "meaningfully to your team.",
    ]
    if user.projects:
        project = user.projects[0]
        highlight = project.description or f"worked on {project.name}"
        paragraphs.append(
            f"Recently, I {highlight}, which demonstrates my relevant experience."
        )
    paragraphs.extend([
        f"{CALL_TO_ACTION[:-1]} about this opportunity? {REFERRAL_ASK}",
        f"Happy to share my resume and discuss how I might contribute to {company}.",
        NO_FOLLOW_UP,
    ])

    core = clean_text("\n\n".join(paragraphs))
    body = add_signature(core, user)
    if len(body) > MAX_BODY_LENGTH:
        short_signature = f"\n\n— {_signature_name(user)}"
        core = _truncate(core, MAX_BODY_LENGTH - len(short_signature))
        body = (core + short_signature)[:MAX_BODY_LENGTH]

    return EmailDraft(
        subject=subject,
        body=body,
        metadata=DraftMetadata(
            model=FALLBACK_MODEL,
            generated_at=clock(),
            source=DraftSource.FALLBACK,
        ),
    )


class EmailGenerator:
    """
    Turns a profile and job posting into an ``EmailDraft``.

    Example:
        ```python
        generator = EmailGenerator(LLMSettings(api_key="sk-or-..."))
        draft = await generator.generate(EmailGenerationOptions(
            job_title="Backend Engineer",
            company="Acme",
            user=UserProfile(full_name="Ada Lovelace"),
        ))
        print(draft.subject, draft.metadata.model)
        ```
    """

    def __init__(
        self,
        settings: Optional[LLMSettings] = None,
        client=None,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            settings: Endpoint, credential, model and sampling settings.
            client: An ``AsyncOpenAI``-compatible client. Built from
                    ``settings`` on first use when omitted.
            metrics: Optional collector for draft outcomes.
            clock: Source of ``generated_at`` timestamps.
        """
        self.settings = settings or LLMSettings()
        self._client = client
        self._metrics = metrics
        self._clock = clock

    @property
    def client(self):
        if self._client is None:
            if not self.settings.api_key:
                raise GenerationError("LLM API key is required")
            self._client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout_seconds,
                max_retries=0,
                default_headers=self.settings.headers(),
            )
        return self._client

    async def generate(
        self,
        options: EmailGenerationOptions,
        timeout: Optional[float] = None,
    ) -> EmailDraft:
        """
        Generate a draft. Never raises for a well-formed profile.

        Args:
            options: Profile, job and style inputs.
            timeout: Seconds to wait for the endpoint. Defaults to
                     ``settings.timeout_seconds``. Task cancellation is
                     not swallowed.

        Returns:
            The model's draft, or the template draft with model "fallback".
        """
        model = options.model or self.settings.model
        started = time.monotonic()
        error = None

        try:
            draft = await self._generate_with_llm(options, model, timeout)
        except GenerationError as exc:
            error = str(exc)
            logger.warning("Draft generation failed, using template: %s", exc)
            draft = generate_fallback_email(options, clock=self._clock)

        if self._metrics:
            self._metrics.record_draft(
                source=draft.metadata.source.value,
                model=draft.metadata.model,
                latency_ms=int((time.monotonic() - started) * 1000),
                tokens_used=draft.metadata.tokens_used,
                error=error,
            )
        return draft

    def generate_sync(
        self,
        options: EmailGenerationOptions,
        timeout: Optional[float] = None,
    ) -> EmailDraft:
        """Synchronous version of generate."""
        return asyncio.run(self.generate(options, timeout=timeout))

    async def _generate_with_llm(
        self,
        options: EmailGenerationOptions,
        model: str,
        timeout: Optional[float],
    ) -> EmailDraft:
        prompt = build_email_prompt(options, MAX_SUBJECT_LENGTH, MAX_BODY_LENGTH)
        response = await self._complete(prompt, model, timeout)

        choices = getattr(response, "choices", None)
        if not choices or getattr(choices[0], "message", None) is None:
            raise GenerationError("Invalid response format from LLM endpoint")

        parsed = parse_draft_json(choices[0].message.content)
        if not parsed.ok:
            raise GenerationError(f"Unparseable model output: {parsed.error}")

        subject, body = extract_draft_fields(parsed.content)
        usage = getattr(response, "usage", None)

        return EmailDraft(
            subject=subject,
            body=add_signature(body, options.user),
            metadata=DraftMetadata(
                model=model,
                generated_at=self._clock(),
                tokens_used=getattr(usage, "total_tokens", None),
                source=parsed.source,
            ),
        )

    async def _complete(self, prompt: str, model: str, timeout: Optional[float]):
        limit = timeout if timeout is not None else self.settings.timeout_seconds
        try:
            return await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    response_format={"type": "json_object"},
                    temperature=self.settings.temperature,
                    max_tokens=self.settings.max_tokens,
                    top_p=self.settings.top_p,
                ),
                timeout=limit,
            )
        except GenerationError:
            raise
        except asyncio.TimeoutError as exc:
            raise GenerationError(f"LLM request timed out after {limit}s") from exc
        except Exception as exc:
            raise GenerationError(f"LLM request failed: {exc}") from exc
