"""FastAPI server for coldguard."""

from __future__ import annotations

import os
from typing import Optional, Dict, Any, List

from fastapi import FastAPI, HTTPException, Header, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from coldguard import (
    ColdEmailGuard,
    ComposeOptions,
    ComposeUrlError,
    EmailGenerationOptions,
    EmailGenerator,
    MetricsCollector,
    Tone,
    UserProfile,
    build_compose_url,
    deliverability_score,
    settings_from_env,
)


def _get_api_key() -> Optional[str]:
    return os.getenv("COLDGUARD_API_KEY")


def _require_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    api_key = _get_api_key()
    if api_key and x_api_key != api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


settings = settings_from_env()
metrics = MetricsCollector()
guard = ColdEmailGuard(limits=settings.limits, costs=settings.costs, metrics=metrics)
generator = EmailGenerator(settings.llm, metrics=metrics)

app = FastAPI(title="coldguard API", version="0.1.0")


class PermissionRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    requested_credits: int = Field(3, ge=0)


class UsageRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    credits_used: int = Field(..., ge=0)


class ContentRequest(BaseModel):
    subject: str = ""
    body: str = ""


class ProjectModel(BaseModel):
    name: str
    description: Optional[str] = None
    technologies: Optional[str] = None
    impact: Optional[str] = None


class ExperienceModel(BaseModel):
    company: str
    position: str
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    description: Optional[str] = None


class ProfileModel(BaseModel):
    full_name: str = ""
    title: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: List[Any] = Field(default_factory=list)
    projects: List[ProjectModel] = Field(default_factory=list)
    work_experiences: List[ExperienceModel] = Field(default_factory=list)


class DraftRequest(BaseModel):
    job_title: str
    company: str
    user: ProfileModel
    company_url: Optional[str] = None
    job_location: Optional[str] = None
    tone: Tone = Tone.PROFESSIONAL
    include_resume: bool = True


class ComposeRequest(BaseModel):
    provider: str = "gmail"
    to: List[str]
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""
    account_index: int = Field(0, ge=0)


class DeliverabilityRequest(BaseModel):
    subject: str = ""
    body: str = ""
    recipients: List[str] = Field(default_factory=list)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/permission", dependencies=[Depends(_require_api_key)])
def check_permission(req: PermissionRequest) -> Dict[str, Any]:
    return guard.check_permission(req.user_id, req.requested_credits).to_dict()


@app.post("/usage", dependencies=[Depends(_require_api_key)])
def record_usage(req: UsageRequest) -> Dict[str, Any]:
    return guard.record_usage(req.user_id, req.credits_used).to_dict()


@app.post("/usage/reserve", dependencies=[Depends(_require_api_key)])
def reserve_usage(req: UsageRequest):
    """Check and record under the user's lock. Denials return 429."""
    result = guard.check_and_record(req.user_id, req.credits_used)
    if not result.allowed:
        headers = {}
        if result.retry_after_seconds is not None:
            headers["Retry-After"] = str(result.retry_after_seconds)
        return JSONResponse(status_code=429, content=result.to_dict(), headers=headers)
    return result.to_dict()


@app.get("/usage/{user_id}", dependencies=[Depends(_require_api_key)])
def usage_stats(user_id: str) -> Dict[str, Any]:
    return guard.get_usage_stats(user_id).to_dict()


@app.post("/validate", dependencies=[Depends(_require_api_key)])
def validate(req: ContentRequest) -> Dict[str, Any]:
    result = guard.validate_email(req.subject, req.body)
    return {"valid": result.valid, "errors": result.errors}


@app.post("/drafts", dependencies=[Depends(_require_api_key)])
async def create_draft(req: DraftRequest) -> Dict[str, Any]:
    options = EmailGenerationOptions(
        job_title=req.job_title,
        company=req.company,
        user=UserProfile.from_dict(req.user.model_dump()),
        company_url=req.company_url,
        job_location=req.job_location,
        tone=req.tone,
        include_resume=req.include_resume,
    )
    draft = await generator.generate(options)
    return draft.to_dict()


@app.post("/compose", dependencies=[Depends(_require_api_key)])
def compose(req: ComposeRequest) -> Dict[str, Any]:
    options = ComposeOptions(
        to=req.to,
        cc=req.cc,
        bcc=req.bcc,
        subject=req.subject,
        body=req.body,
        account_index=req.account_index,
    )
    try:
        url = build_compose_url(req.provider, options)
    except ComposeUrlError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    metrics.record_compose(req.provider.lower(), len(url))
    return {"url": url, "length": len(url)}


@app.post("/deliverability", dependencies=[Depends(_require_api_key)])
def deliverability(req: DeliverabilityRequest) -> Dict[str, Any]:
    return {"score": deliverability_score(req.subject, req.body, req.recipients)}
