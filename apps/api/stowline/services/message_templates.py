"""SMS and email message templates.

Templates use {{variable}} placeholders. Each template declares which
variables it needs; rendering fails loudly when a required one is missing
instead of sending a message with a hole in it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal

VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")

Channel = Literal["sms", "email"]
Domain = Literal["auth", "account", "appointment", "booking"]


class TemplateRenderError(ValueError):
    """Raised when required template variables are missing."""

    def __init__(self, template_key: str, missing: list[str]):
        self.template_key = template_key
        self.missing = missing
        super().__init__(
            f"Template '{template_key}' is missing required variables: {', '.join(missing)}"
        )


@dataclass(frozen=True)
class RenderedMessage:
    text: str
    subject: str | None = None
    html: str | None = None


@dataclass(frozen=True)
class MessageTemplate:
    """A channel message with declared variables."""

    key: str
    channel: Channel
    domain: Domain
    text: str
    required_variables: tuple[str, ...] = ()
    optional_variables: tuple[str, ...] = ()
    subject: str | None = None
    html: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.channel == "email" and not self.subject:
            raise ValueError(f"Email template '{self.key}' needs a subject")

        declared = frozenset(self.required_variables) | frozenset(self.optional_variables)
        used: set[str] = set()
        for part in (self.text, self.subject or "", self.html or ""):
            used.update(VARIABLE_PATTERN.findall(part))
        undeclared = sorted(used - declared)
        if undeclared:
            raise ValueError(
                f"Template '{self.key}' uses undeclared variables: {', '.join(undeclared)}"
            )

    def missing_variables(self, variables: dict[str, Any]) -> list[str]:
        return [
            name for name in self.required_variables
            if variables.get(name) is None
        ]

    def render(self, variables: dict[str, Any]) -> RenderedMessage:
        """
        Substitute every placeholder.

        Required variables must be present and non-None; optional ones
        default to an empty string.

        Raises:
            TemplateRenderError: listing all missing required variables
        """
        missing = self.missing_variables(variables)
        if missing:
            raise TemplateRenderError(self.key, missing)

        def replace_var(match: re.Match) -> str:
            value = variables.get(match.group(1))
            return "" if value is None else str(value)

        return RenderedMessage(
            text=VARIABLE_PATTERN.sub(replace_var, self.text),
            subject=VARIABLE_PATTERN.sub(replace_var, self.subject) if self.subject else None,
            html=VARIABLE_PATTERN.sub(replace_var, self.html) if self.html else None,
        )


# =============================================================================
# SMS
# =============================================================================

VERIFICATION_CODE_SMS = MessageTemplate(
    key="verification_code_sms",
    channel="sms",
    domain="auth",
    text="Your Stowline verification code is {{code}}. It expires in {{ttl_minutes}} minutes.",
    required_variables=("code", "ttl_minutes"),
)

DRIVER_APPROVAL_SMS = MessageTemplate(
    key="driver_approval_sms",
    channel="sms",
    domain="account",
    text=(
        "Hi {{first_name}}, your Stowline driver account has been approved! "
        "{{status_message}} Download the driver app to get started."
    ),
    required_variables=("first_name",),
    optional_variables=("status_message",),
)

MOVER_ACTIVATED_SMS = MessageTemplate(
    key="mover_activated_sms",
    channel="sms",
    domain="account",
    text=(
        "{{company_name}} is now active on Stowline and can receive job offers. "
        "First approved driver: {{driver_name}}."
    ),
    required_variables=("company_name", "driver_name"),
)

APPOINTMENT_CONFIRMATION_SMS = MessageTemplate(
    key="appointment_confirmation_sms",
    channel="sms",
    domain="booking",
    text=(
        "Hi {{first_name}}, your {{appointment_type}} is booked for {{date}}{{time_window}}. "
        "Job code: {{job_code}}."
    ),
    required_variables=("first_name", "appointment_type", "date", "job_code"),
    optional_variables=("time_window",),
)

APPOINTMENT_CANCELLATION_SMS = MessageTemplate(
    key="appointment_cancellation_sms",
    channel="sms",
    domain="appointment",
    text=(
        "Job {{job_code}} on {{date}} has been canceled by the customer. "
        "{{reason}}"
    ),
    required_variables=("job_code", "date"),
    optional_variables=("reason",),
)

DRIVER_INVITATION_SMS = MessageTemplate(
    key="driver_invitation_sms",
    channel="sms",
    domain="account",
    text="{{company_name}} invited you to drive with Stowline. Sign up: {{invite_url}}",
    required_variables=("company_name", "invite_url"),
)

# =============================================================================
# Email
# =============================================================================

ADMIN_VERIFICATION_EMAIL = MessageTemplate(
    key="admin_verification_email",
    channel="email",
    domain="auth",
    subject="Your Stowline admin login code",
    text="Your login code is {{code}}. It expires in {{ttl_minutes}} minutes.",
    html="<p>Your login code is <strong>{{code}}</strong>.</p><p>It expires in {{ttl_minutes}} minutes.</p>",
    required_variables=("code", "ttl_minutes"),
)

DRIVER_APPROVAL_EMAIL = MessageTemplate(
    key="driver_approval_email",
    channel="email",
    domain="account",
    subject="Welcome to Stowline, {{first_name}}!",
    text=(
        "Hi {{first_name}} {{last_name}},\n\n"
        "Your driver application has been approved. "
        "Approved services: {{services}}.\n\n"
        "Sign in at {{login_url}} to finish setting up your account."
    ),
    html=(
        "<p>Hi {{first_name}} {{last_name}},</p>"
        "<p>Your driver application has been approved.</p>"
        "<p>Approved services: {{services}}.</p>"
        '<p><a href="{{login_url}}">Sign in</a> to finish setting up your account.</p>'
    ),
    required_variables=("first_name", "last_name", "login_url"),
    optional_variables=("services",),
)

MOVER_ACTIVATED_EMAIL = MessageTemplate(
    key="mover_activated_email",
    channel="email",
    domain="account",
    subject="{{company_name}} is now active on Stowline",
    text=(
        "Your moving partner account ({{email}}) is active.\n\n"
        "{{driver_name}} has been approved, so {{company_name}} can now receive "
        "job offers.\n\n{{login_url}}"
    ),
    html=(
        "<p>Your moving partner account ({{email}}) is active.</p>"
        "<p>{{driver_name}} has been approved, so {{company_name}} can now receive "
        "job offers.</p>"
        '<p><a href="{{login_url}}">Go to your dashboard</a></p>'
    ),
    required_variables=("company_name", "email", "driver_name", "login_url"),
)

APPOINTMENT_CONFIRMATION_EMAIL = MessageTemplate(
    key="appointment_confirmation_email",
    channel="email",
    domain="booking",
    subject="Your Stowline appointment {{job_code}} is booked",
    text=(
        "Hi {{first_name}},\n\nYour {{appointment_type}} at {{address}} is booked for "
        "{{date}}{{time_window}}.\n\nJob code: {{job_code}}"
    ),
    required_variables=("first_name", "appointment_type", "address", "date", "job_code"),
    optional_variables=("time_window",),
)


TEMPLATES: dict[str, MessageTemplate] = {
    t.key: t
    for t in (
        VERIFICATION_CODE_SMS,
        DRIVER_APPROVAL_SMS,
        MOVER_ACTIVATED_SMS,
        APPOINTMENT_CONFIRMATION_SMS,
        APPOINTMENT_CANCELLATION_SMS,
        DRIVER_INVITATION_SMS,
        ADMIN_VERIFICATION_EMAIL,
        DRIVER_APPROVAL_EMAIL,
        MOVER_ACTIVATED_EMAIL,
        APPOINTMENT_CONFIRMATION_EMAIL,
    )
}


def get_template(key: str) -> MessageTemplate:
    template = TEMPLATES.get(key)
    if template is None:
        raise KeyError(f"Unknown message template '{key}'")
    return template


def list_templates(
    channel: Channel | None = None, domain: Domain | None = None
) -> list[MessageTemplate]:
    return [
        t for t in TEMPLATES.values()
        if (channel is None or t.channel == channel) and (domain is None or t.domain == domain)
    ]
