"""Tests for SMS/email message templates - unit tests only."""

import pytest

from stowline.services import messaging_service
from stowline.services.message_templates import (
    TEMPLATES,
    VARIABLE_PATTERN,
    MessageTemplate,
    TemplateRenderError,
    get_template,
    list_templates,
)


# =============================================================================
# Rendering
# =============================================================================

def test_render_substitutes_every_placeholder():
    rendered = get_template("verification_code_sms").render({"code": "123456", "ttl_minutes": 10})
    assert "123456" in rendered.text
    assert "10 minutes" in rendered.text
    assert "{{" not in rendered.text


def test_render_missing_required_variable_raises():
    template = get_template("verification_code_sms")
    with pytest.raises(TemplateRenderError) as exc_info:
        template.render({"ttl_minutes": 10})
    assert exc_info.value.missing == ["code"]
    assert exc_info.value.template_key == "verification_code_sms"


def test_render_none_counts_as_missing():
    with pytest.raises(TemplateRenderError):
        get_template("mover_activated_sms").render({"company_name": None, "driver_name": "Dana"})


def test_render_reports_all_missing_variables():
    with pytest.raises(TemplateRenderError) as exc_info:
        get_template("verification_code_sms").render({})
    assert set(exc_info.value.missing) == {"code", "ttl_minutes"}


def test_optional_variable_renders_empty():
    rendered = get_template("driver_approval_sms").render({"first_name": "Dana"})
    assert rendered.text.startswith("Hi Dana,")
    assert "{{" not in rendered.text
    assert "None" not in rendered.text


def test_email_template_renders_subject_and_html():
    rendered = get_template("admin_verification_email").render({"code": "654321", "ttl_minutes": 10})
    assert rendered.subject
    assert "{{" not in rendered.subject
    assert "654321" in rendered.text
    assert rendered.html is None or "{{" not in rendered.html


def test_template_render_error_is_value_error():
    assert issubclass(TemplateRenderError, ValueError)


# =============================================================================
# Registry
# =============================================================================

def test_every_template_renders_with_its_required_variables():
    for template in TEMPLATES.values():
        variables = {name: "x" for name in template.required_variables}
        rendered = template.render(variables)
        assert not VARIABLE_PATTERN.search(rendered.text), template.key


def test_get_template_unknown_key():
    with pytest.raises(KeyError):
        get_template("does_not_exist")


def test_list_templates_filters_by_channel():
    sms = list_templates(channel="sms")
    assert sms
    assert all(t.channel == "sms" for t in sms)


# =============================================================================
# Definition checks
# =============================================================================

def test_undeclared_placeholder_rejected():
    with pytest.raises(ValueError, match="undeclared"):
        MessageTemplate(
            key="broken",
            channel="sms",
            domain="account",
            text="Hello {{first_name}}, job {{job_code}}",
            required_variables=("first_name",),
        )


def test_email_template_requires_subject():
    with pytest.raises(ValueError, match="subject"):
        MessageTemplate(key="no_subject", channel="email", domain="account", text="Hi")


# =============================================================================
# Sending
# =============================================================================

async def test_send_templated_sms_does_not_send_when_render_fails(outbox):
    with pytest.raises(TemplateRenderError):
        await messaging_service.send_templated_sms("verification_code_sms", "5551234567", {})
    assert outbox.sms == []


async def test_send_templated_sms_rejects_email_template(outbox):
    with pytest.raises(ValueError):
        await messaging_service.send_templated_sms(
            "admin_verification_email", "5551234567", {"code": "1", "ttl_minutes": 1}
        )
    assert outbox.sms == []


async def test_send_sms_best_effort_swallows_render_errors(outbox):
    ok = await messaging_service.send_sms_best_effort("mover_activated_sms", "5551234567", {})
    assert ok is False
    assert outbox.sms == []


async def test_send_sms_best_effort_skips_missing_phone(outbox):
    ok = await messaging_service.send_sms_best_effort(
        "mover_activated_sms", None, {"company_name": "Careful Movers"}
    )
    assert ok is False
    assert outbox.sms == []
