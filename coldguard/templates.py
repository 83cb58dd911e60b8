"""
Outreach template library.

Hand-written subject/body pairs keyed by purpose and tone, with ``{{name}}``
placeholders. Used when the user picks a template instead of a generated
draft.
"""

import re
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    body: str


TEMPLATE_VARIABLES = (
    "recipientName",
    "recipientTitle",
    "companyName",
    "senderName",
    "senderTitle",
    "senderBackground",
    "emailPurpose",
    "foundVia",
    "specificPoints",
    "callToAction",
)

PURPOSES = (
    "job-inquiry",
    "informational",
    "networking",
    "collaboration",
    "mentorship",
    "introduction",
    "other",
)
TONES = ("professional", "friendly", "formal")

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

_PROFESSIONAL_CLOSE = "Best regards,\n{{senderName}}"
_FRIENDLY_CLOSE = "Best,\n{{senderName}}"
_FORMAL_CLOSE = "Yours sincerely,\n{{senderName}}"


def _body(*paragraphs: str) -> str:
    return "\n\n".join(paragraphs)


TEMPLATES: Dict[str, Dict[str, EmailTemplate]] = {
    "job-inquiry": {
        "professional": EmailTemplate(
            "Interested in {{recipientTitle}} opportunities at {{companyName}}",
            _body(
                "Dear {{recipientName}},",
                "I came across {{companyName}} through {{foundVia}} and was particularly "
                "impressed by {{specificPoints}}.",
                "I am currently a {{senderTitle}} with experience in {{senderBackground}}. "
                "I'm reaching out because I'm very interested in exploring "
                "{{recipientTitle}} opportunities at {{companyName}}.",
                "{{callToAction}}",
                "Thank you for your time, and I look forward to potentially connecting.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Quick question about {{recipientTitle}} roles at {{companyName}}",
            _body(
                "Hi {{recipientName}},",
                "I recently came across {{companyName}} through {{foundVia}} and was "
                "really excited about {{specificPoints}}.",
                "I'm {{senderName}}, currently working as a {{senderTitle}}. {{senderBackground}}",
                "I'd love to learn more about the {{recipientTitle}} opportunities at "
                "{{companyName}}. {{callToAction}}",
                "Looking forward to connecting!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Inquiry Regarding {{recipientTitle}} Position at {{companyName}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing to express my keen interest in exploring {{recipientTitle}} "
                "opportunities at {{companyName}}, which I discovered through {{foundVia}}.",
                "As a {{senderTitle}} with {{senderBackground}}, I was particularly drawn "
                "to {{specificPoints}}.",
                "{{callToAction}}",
                "Thank you for considering my inquiry. I look forward to the possibility "
                "of discussing this further.",
                _FORMAL_CLOSE,
            ),
        ),
    },
    "informational": {
        "professional": EmailTemplate(
            "Request for Informational Discussion - {{recipientTitle}} at {{companyName}}",
            _body(
                "Dear {{recipientName}},",
                "I discovered your profile through {{foundVia}} and was particularly "
                "impressed by {{specificPoints}}.",
                "I am {{senderName}}, currently {{senderTitle}} with {{senderBackground}}. "
                "I would greatly value the opportunity to learn more about your experience "
                "at {{companyName}} and your journey in the industry.",
                "{{callToAction}}",
                "Thank you for considering my request. I understand you're busy and "
                "appreciate any time you can spare.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Quick chat about your role at {{companyName}}?",
            _body(
                "Hi {{recipientName}},",
                "I came across your profile on {{foundVia}} and was really inspired by "
                "{{specificPoints}}.",
                "I'm {{senderName}}, and I'm currently {{senderTitle}}. {{senderBackground}}",
                "I'd love to learn more about your experience as {{recipientTitle}} at "
                "{{companyName}}. {{callToAction}}",
                "Thanks for considering!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Request for Professional Insights - {{recipientTitle}} Role at {{companyName}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing to request your insights regarding the {{recipientTitle}} "
                "role at {{companyName}}. I discovered your profile through {{foundVia}} "
                "and was particularly impressed by {{specificPoints}}.",
                "As a {{senderTitle}} with {{senderBackground}}, I am keen to learn from "
                "your experience and expertise in the field.",
                "{{callToAction}}",
                "I appreciate your time and consideration of my request.",
                _FORMAL_CLOSE,
            ),
        ),
    },
    "networking": {
        "professional": EmailTemplate(
            "Professional Connection Request - {{senderTitle}} reaching out",
            _body(
                "Dear {{recipientName}},",
                "I came across your profile through {{foundVia}} and was impressed by "
                "{{specificPoints}}.",
                "I'm {{senderName}}, currently {{senderTitle}}. {{senderBackground}}",
                "I believe there could be valuable opportunities for collaboration and "
                "knowledge sharing between us. {{callToAction}}",
                "Thank you for considering my connection request.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Let's connect! Fellow {{recipientTitle}} reaching out",
            _body(
                "Hi {{recipientName}},",
                "I found you through {{foundVia}} and was really interested in "
                "{{specificPoints}}.",
                "I'm {{senderName}}, working as {{senderTitle}}. {{senderBackground}}",
                "I'd love to connect and perhaps explore ways we could help each other "
                "grow professionally. {{callToAction}}",
                "Looking forward to potentially connecting!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Professional Network Extension - {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing to establish a professional connection with you, having "
                "discovered your profile through {{foundVia}}. Your work in "
                "{{specificPoints}} particularly caught my attention.",
                "As a {{senderTitle}} with {{senderBackground}}, I believe there could be "
                "mutual benefit in connecting.",
                "{{callToAction}}",
                "Thank you for considering my request.",
                _FORMAL_CLOSE,
            ),
        ),
    },
    "collaboration": {
        "professional": EmailTemplate(
            "Collaboration Opportunity - {{companyName}} and {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I recently learned about {{companyName}} through {{foundVia}} and was "
                "particularly impressed by {{specificPoints}}.",
                "I'm {{senderName}}, {{senderTitle}} with {{senderBackground}}. I believe "
                "there could be interesting opportunities for collaboration between us.",
                "{{callToAction}}",
                "Thank you for your time, and I look forward to potentially discussing "
                "this further.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Collaboration idea for {{companyName}}",
            _body(
                "Hi {{recipientName}},",
                "I recently came across {{companyName}} through {{foundVia}} and was "
                "really excited about {{specificPoints}}.",
                "I'm {{senderName}}, and as a {{senderTitle}} with {{senderBackground}}, "
                "I see real potential for us to work together.",
                "{{callToAction}}",
                "Looking forward to your thoughts!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Proposed Collaboration - {{companyName}} and {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing to propose a potential collaboration between {{companyName}} "
                "and myself. I discovered your organization through {{foundVia}} and was "
                "particularly impressed by {{specificPoints}}.",
                "As a {{senderTitle}} with {{senderBackground}}, I believe there could be "
                "significant mutual benefit in exploring a partnership.",
                "{{callToAction}}",
                "Thank you for considering this proposal.",
                _FORMAL_CLOSE,
            ),
        ),
    },
    "mentorship": {
        "professional": EmailTemplate(
            "Mentorship Request - {{senderTitle}} seeking guidance",
            _body(
                "Dear {{recipientName}},",
                "I discovered your profile through {{foundVia}} and was particularly "
                "inspired by {{specificPoints}}.",
                "I am {{senderName}}, currently {{senderTitle}} with {{senderBackground}}. "
                "I am reaching out because your experience and insights would be "
                "invaluable to my professional development.",
                "{{callToAction}}",
                "Thank you for considering my request.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Seeking mentorship advice - {{recipientTitle}} at {{companyName}}",
            _body(
                "Hi {{recipientName}},",
                "I came across your profile on {{foundVia}} and was really inspired by "
                "{{specificPoints}}.",
                "I'm {{senderName}}, currently {{senderTitle}}. {{senderBackground}}",
                "I would really value your guidance in navigating my career path. "
                "{{callToAction}}",
                "Thanks for considering!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Request for Professional Mentorship - {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing to request your consideration as a professional mentor. "
                "I discovered your profile through {{foundVia}} and was deeply impressed "
                "by {{specificPoints}}.",
                "As a {{senderTitle}} with {{senderBackground}}, I am seeking guidance "
                "from experienced professionals like yourself.",
                "{{callToAction}}",
                "Thank you for considering my request.",
                _FORMAL_CLOSE,
            ),
        ),
    },
    "introduction": {
        "professional": EmailTemplate(
            "Introduction via {{foundVia}} - {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I was introduced to your work through {{foundVia}} and was particularly "
                "impressed by {{specificPoints}}.",
                "I am {{senderName}}, currently {{senderTitle}} with {{senderBackground}}.",
                "{{callToAction}}",
                "Thank you for your time, and I look forward to potentially connecting.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Quick intro - {{foundVia}} connection",
            _body(
                "Hi {{recipientName}},",
                "{{foundVia}} mentioned you'd be a great person to connect with, and I was "
                "really interested in {{specificPoints}}.",
                "I'm {{senderName}}, working as {{senderTitle}}. {{senderBackground}}",
                "{{callToAction}}",
                "Looking forward to connecting!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Professional Introduction - {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing to introduce myself, having been made aware of your work "
                "through {{foundVia}}. Your achievements in {{specificPoints}} are "
                "particularly noteworthy.",
                "As a {{senderTitle}} with {{senderBackground}}, I believe there could be "
                "value in establishing a professional connection.",
                "{{callToAction}}",
                "Thank you for considering this introduction.",
                _FORMAL_CLOSE,
            ),
        ),
    },
    "other": {
        "professional": EmailTemplate(
            "Professional Inquiry - {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I came across your profile through {{foundVia}} and was particularly "
                "interested in {{specificPoints}}.",
                "I am {{senderName}}, currently {{senderTitle}} with {{senderBackground}}.",
                "{{callToAction}}",
                "Thank you for your time and consideration.",
                _PROFESSIONAL_CLOSE,
            ),
        ),
        "friendly": EmailTemplate(
            "Quick question for {{recipientName}}",
            _body(
                "Hi {{recipientName}},",
                "I found you through {{foundVia}} and was really interested in "
                "{{specificPoints}}.",
                "I'm {{senderName}}, currently {{senderTitle}}. {{senderBackground}}",
                "{{callToAction}}",
                "Thanks for your time!",
                _FRIENDLY_CLOSE,
            ),
        ),
        "formal": EmailTemplate(
            "Professional Inquiry - {{senderTitle}}",
            _body(
                "Dear {{recipientName}},",
                "I am writing regarding {{specificPoints}}, having discovered your "
                "profile through {{foundVia}}.",
                "As a {{senderTitle}} with {{senderBackground}}, I wanted to reach out "
                "concerning this matter.",
                "{{callToAction}}",
                "Thank you for your consideration.",
                _FORMAL_CLOSE,
            ),
        ),
    },
}


def get_template(purpose: str, tone: str) -> EmailTemplate:
    """Look up a template. Raises ValueError for an unknown purpose or tone."""
    template = TEMPLATES.get(purpose, {}).get(tone)
    if template is None:
        raise ValueError(f"Template not found for purpose={purpose!r}, tone={tone!r}")
    return template


def render_template(purpose: str, tone: str, variables: Dict[str, str]) -> EmailTemplate:
    """
    Fill a template's placeholders.

    Placeholders without a value in ``variables`` are left as they are so
    the user can spot and edit them.
    """
    template = get_template(purpose, tone)

    def substitute(match: re.Match) -> str:
        value = variables.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return EmailTemplate(
        subject=_PLACEHOLDER.sub(substitute, template.subject),
        body=_PLACEHOLDER.sub(substitute, template.body),
    )
