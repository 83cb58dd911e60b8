"""
Command-line interface for coldguard.

Provides commands for:
- Validating a draft
- Scoring deliverability
- Building compose links
- Generating a draft for a job posting
"""

import argparse
import logging
import sys

from coldguard.compose import build_compose_url, deliverability_score, PROVIDERS
from coldguard.config import settings_from_env
from coldguard.errors import ComposeUrlError
from coldguard.generator import EmailGenerator
from coldguard.metrics import LOG_FORMAT
from coldguard.models import ComposeOptions, EmailGenerationOptions, Tone, UserProfile
from coldguard.validation import validate_email_content


def cmd_validate(args):
    """Validate a subject and body."""
    settings = settings_from_env()
    result = validate_email_content(args.subject, args.body, settings.limits)

    if result.valid:
        print("OK: no problems found")
        return 0

    print("Problems:")
    for error in result.errors:
        print(f"  - {error}")
    return 1


def cmd_score(args):
    """Print the deliverability score for a draft."""
    score = deliverability_score(args.subject, args.body, args.to or [])
    print(f"Deliverability score: {score}/100")
    return 0


def cmd_compose(args):
    """Print a compose URL."""
    options = ComposeOptions(
        to=args.to,
        cc=args.cc or [],
        bcc=args.bcc or [],
        subject=args.subject,
        body=args.body,
        account_index=args.account,
    )
    try:
        print(build_compose_url(args.provider, options))
    except ComposeUrlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def cmd_draft(args):
    """Generate a draft. Uses the template when no API key is configured."""
    settings = settings_from_env()
    user = UserProfile(
        full_name=args.name,
        title=args.title,
        email=args.email,
        skills=args.skill or [],
    )
    options = EmailGenerationOptions(
        job_title=args.job_title,
        company=args.company,
        user=user,
        company_url=args.company_url,
        job_location=args.location,
        tone=Tone(args.tone),
    )

    generator = EmailGenerator(settings.llm)
    draft = generator.generate_sync(options)

    print("=" * 60)
    print(f"Subject: {draft.subject}")
    print("=" * 60)
    print(draft.body)
    print("-" * 60)
    print(f"Model: {draft.metadata.model} ({draft.metadata.source.value})")
    if draft.metadata.tokens_used is not None:
        print(f"Tokens: {draft.metadata.tokens_used}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="coldguard - cold outreach guard and draft tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    val_parser = subparsers.add_parser("validate", help="Validate a subject and body")
    val_parser.add_argument("subject")
    val_parser.add_argument("body")

    score_parser = subparsers.add_parser("score", help="Score deliverability")
    score_parser.add_argument("subject")
    score_parser.add_argument("body")
    score_parser.add_argument("--to", nargs="*", help="Recipient addresses")

    comp_parser = subparsers.add_parser("compose", help="Build a compose URL")
    comp_parser.add_argument("--provider", "-p", default="gmail",
                             choices=[p.value for p in PROVIDERS])
    comp_parser.add_argument("--to", nargs="+", required=True)
    comp_parser.add_argument("--cc", nargs="*")
    comp_parser.add_argument("--bcc", nargs="*")
    comp_parser.add_argument("--subject", "-s", default="")
    comp_parser.add_argument("--body", "-b", default="")
    comp_parser.add_argument("--account", type=int, default=0,
                             help="Gmail account index")

    draft_parser = subparsers.add_parser("draft", help="Generate a cold email draft")
    draft_parser.add_argument("--job-title", required=True)
    draft_parser.add_argument("--company", required=True)
    draft_parser.add_argument("--name", required=True, help="Your full name")
    draft_parser.add_argument("--title", help="Your current title")
    draft_parser.add_argument("--email", help="Your email address")
    draft_parser.add_argument("--skill", action="append", help="Repeat for each skill")
    draft_parser.add_argument("--company-url")
    draft_parser.add_argument("--location")
    draft_parser.add_argument("--tone", default=Tone.PROFESSIONAL.value,
                              choices=[t.value for t in Tone])

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    commands = {
        "validate": cmd_validate,
        "score": cmd_score,
        "compose": cmd_compose,
        "draft": cmd_draft,
    }
    if args.command not in commands:
        parser.print_help()
        return 1
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
