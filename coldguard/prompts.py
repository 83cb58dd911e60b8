"""Prompt construction for cold email drafts."""

from typing import Optional, Union

from coldguard.models import EmailGenerationOptions, Project, Tone, WorkExperience


MAX_SKILLS = 8
MAX_PROJECTS = 2
MAX_EXPERIENCES = 2

# Phrases that make a draft read as machine-written.
AVOID_PHRASES = (
    'Generic phrases like "I hope this email finds you well"',
    "Overly enthusiastic language",
    "Buzzwords or clichés",
    "Any mention of AI or automation",
    "Long paragraphs or walls of text",
)

CALL_TO_ACTION = "Would you be open to a brief conversation?"
REFERRAL_ASK = "If you're not the right person, could you point me to someone who is?"
NO_FOLLOW_UP = "Feel free to let me know if you'd prefer no follow-ups."
RESUME_OFFER = "Happy to share my resume"


def _skill_name(skill: Union[str, dict]) -> str:
    if isinstance(skill, dict):
        return str(skill.get("skill_name") or "").strip()
    return str(skill or "").strip()


def format_skills(skills: Optional[list]) -> str:
    """First eight distinct skill names, comma separated, in original order."""
    if not skills:
        return ""
    seen = []
    for skill in skills:
        name = _skill_name(skill)
        if name and name.lower() not in (s.lower() for s in seen):
            seen.append(name)
        if len(seen) == MAX_SKILLS:
            break
    return ", ".join(seen)


def format_projects(projects: Optional[list[Project]]) -> str:
    """Bullet lines for the first two projects."""
    if not projects:
        return ""
    lines = []
    for project in projects[:MAX_PROJECTS]:
        highlight = project.impact or project.description or ""
        tech = f" ({project.technologies})" if project.technologies else ""
        line = f"• {project.name}{tech}"
        lines.append(f"{line}: {highlight}" if highlight else line)
    return "\n".join(lines)


def format_experience(experiences: Optional[list[WorkExperience]]) -> str:
    """Bullet lines for the two most recent roles. A missing end year is current."""
    if not experiences:
        return ""
    recent = sorted(
        experiences,
        key=lambda exp: exp.end_year if exp.end_year is not None else float("inf"),
        reverse=True,
    )[:MAX_EXPERIENCES]
    return "\n".join(f"• {exp.position} at {exp.company}" for exp in recent)


def build_email_prompt(
    options: EmailGenerationOptions,
    max_subject_length: int = 60,
    max_body_length: int = 1400,
) -> str:
    """Build the user message sent to the chat-completion endpoint."""
    user = options.user
    tone = options.tone.value if isinstance(options.tone, Tone) else str(options.tone)

    skills = format_skills(user.skills)
    projects = format_projects(user.projects)
    experience = format_experience(user.work_experiences)

    location_info = f" ({options.job_location})" if options.job_location else ""
    company_info = f" ({options.company_url})" if options.company_url else ""

    requirements = [
        f"- Subject: Max {max_subject_length} characters, avoid spam words, mention position",
        f"- Body: Max {max_body_length} characters total",
        f"- Tone: {tone}, human-sounding, not AI-generated",
        "- Structure: 3-4 short paragraphs",
        "- Include: One key achievement/project with quantified impact",
        f'- CTA: "{CALL_TO_ACTION}"',
        f'- Add: "{REFERRAL_ASK}"',
        f'- End with: "{NO_FOLLOW_UP}"',
    ]
    if options.include_resume:
        requirements.append(f'- Mention: "{RESUME_OFFER}"')

    candidate = [
        f"Name: {user.full_name or 'Job Applicant'}",
        f"Current Role: {user.title or 'Professional'}",
    ]
    if skills:
        candidate.append(f"Skills: {skills}")
    if experience:
        candidate.append(f"Experience:\n{experience}")
    if projects:
        candidate.append(f"Key Projects:\n{projects}")

    avoid = "\n".join(f"- {phrase}" for phrase in AVOID_PHRASES)

    return (
        f"Write a concise, professional cold email for {user.full_name or 'the candidate'} "
        f"applying to {options.company}{company_info} for the "
        f'"{options.job_title}" position{location_info}.\n'
        "\n"
        "REQUIREMENTS:\n"
        + "\n".join(requirements)
        + "\n\nCANDIDATE INFO:\n"
        + "\n".join(candidate)
        + "\n\nAVOID:\n"
        + avoid
        + "\n\nReturn ONLY valid JSON:\n"
        "{\n"
        '  "subject": "Brief subject line",\n'
        '  "body": "Email body with proper line breaks using \\n"\n'
        "}"
    )
