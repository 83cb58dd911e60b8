"""Configuration for the cold email guard.

Core components receive these objects by injection. Only the outer layer
(CLI, HTTP API) reads the environment, through ``settings_from_env``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from typing import Dict, Any, Optional


OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "meta-llama/llama-3.1-8b-instruct"
DEFAULT_TITLE = "Cold Email Generator"


@dataclass(frozen=True)
class ColdEmailLimits:
    """Usage and content limits, shared by every user of a guard."""
    max_contacts_per_search: int = 2
    max_credits_per_user: int = 100  # per calendar month
    max_credits_per_day: int = 10
    max_emails_per_day: int = 20
    max_subject_length: int = 60
    max_body_length: int = 1400
    rate_limit_requests: int = 5
    rate_limit_window: int = 60  # seconds

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} cannot be negative, got {getattr(self, f.name)}")


@dataclass(frozen=True)
class ColdEmailCosts:
    """Unit prices used for cost estimates."""
    credit_price_usd: float = 0.10
    price_per_1k_tokens_usd: float = 0.0005
    estimated_tokens_per_email: int = 400

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} cannot be negative, got {getattr(self, f.name)}")


@dataclass(frozen=True)
class LLMSettings:
    """Chat-completion endpoint settings for draft generation."""
    api_key: Optional[str] = None
    base_url: str = OPENROUTER_BASE_URL
    model: str = DEFAULT_MODEL
    referer: str = "http://localhost:3000"
    title: str = DEFAULT_TITLE
    timeout_seconds: float = 20.0
    temperature: float = 0.5
    max_tokens: int = 800
    top_p: float = 0.9

    def headers(self) -> Dict[str, str]:
        """Extra headers sent with every completion request."""
        return {"HTTP-Referer": self.referer, "X-Title": self.title}


DEFAULT_LIMITS = ColdEmailLimits()
DEFAULT_COSTS = ColdEmailCosts()


@dataclass(frozen=True)
class Settings:
    """Everything the outer layer needs to wire up a guard and generator."""
    limits: ColdEmailLimits = DEFAULT_LIMITS
    costs: ColdEmailCosts = DEFAULT_COSTS
    llm: LLMSettings = LLMSettings()


def _parse_json_env(var_name: str) -> Dict[str, Any] | None:
    value = os.getenv(var_name)
    if not value:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def _override(base, overrides: Dict[str, Any] | None):
    if not overrides:
        return base
    known = {f.name for f in fields(base)}
    return replace(base, **{k: v for k, v in overrides.items() if k in known})


def settings_from_env() -> Settings:
    """Build settings from environment variables.

    ``COLDGUARD_LIMITS_JSON`` and ``COLDGUARD_COSTS_JSON`` hold JSON objects
    whose keys override the matching dataclass fields. Malformed values
    are ignored.
    """
    limits = _override(DEFAULT_LIMITS, _parse_json_env("COLDGUARD_LIMITS_JSON"))
    costs = _override(DEFAULT_COSTS, _parse_json_env("COLDGUARD_COSTS_JSON"))

    timeout = LLMSettings.timeout_seconds
    raw_timeout = os.getenv("COLDGUARD_LLM_TIMEOUT")
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            pass

    llm = LLMSettings(
        api_key=os.getenv("OPENROUTER_API_KEY"),
        model=os.getenv("COLDGUARD_MODEL") or DEFAULT_MODEL,
        referer=os.getenv("COLDGUARD_SITE_URL") or LLMSettings.referer,
        timeout_seconds=timeout,
    )
    return Settings(limits=limits, costs=costs, llm=llm)
