import smtplib
from email.message import EmailMessage
from typing import List, Optional

import requests

from slopchat.config import Settings
from slopchat.models.lead import LeadRecord
from slopchat.utils.logger import get_logger

logger = get_logger(__name__)


def _format_value(value: Optional[str], default: str = "Not specified") -> str:
    if value is None or not str(value).strip():
        return default
    return str(value)


def build_lead_subject(lead: LeadRecord) -> str:
    return f"New Lead: {lead.name} - {_format_value(lead.event_type, 'Event Inquiry')}"


def build_lead_body(lead: LeadRecord) -> str:
    lines = [
        "New Lead from SlopGPT Chat",
        "",
        "Contact Information:",
        "--------------------",
    ]
    for label, value, default in [
        ("Name", lead.name, "Not provided"),
        ("Email", lead.email, "Not provided"),
        ("Phone", lead.phone, "Not provided"),
    ]:
        lines.append(f"{label}: {_format_value(value, default)}")

    lines += ["", "Event Details:", "--------------"]
    for label, value, default in [
        ("Event Type", lead.event_type, "Not specified"),
        ("Theme/Concept", lead.theme, "Not specified"),
        ("Date", lead.date, "Not specified"),
        ("Guest Count", lead.guest_count, "Not specified"),
        ("Location", lead.location, "Not specified"),
        ("Budget", lead.budget, "Not discussed"),
    ]:
        lines.append(f"{label}: {_format_value(value, default)}")

    lines += [
        "",
        "Conversation Summary:",
        "--------------------",
        _format_value(lead.conversation_summary, "No summary available"),
        "",
        "---",
        "This lead was captured via the SlopGPT chat assistant.",
    ]
    return "\n".join(lines)


def email_transport(config: Settings) -> Optional[str]:
    if config.resend_api_key:
        return "resend"
    if config.smtp_host:
        return "smtp"
    return None


def send_via_resend(lead: LeadRecord, recipients: List[str], config: Settings) -> None:
    response = requests.post(
        config.resend_api_url,
        json={
            "from": config.lead_notification_from,
            "to": recipients,
            "subject": build_lead_subject(lead),
            "text": build_lead_body(lead),
        },
        headers={"Authorization": f"Bearer {config.resend_api_key}"},
        timeout=config.webhook_timeout,
    )
    response.raise_for_status()
    logger.info("Lead email sent via Resend to %s", ", ".join(recipients))


def send_via_smtp(lead: LeadRecord, recipients: List[str], config: Settings) -> None:
    message = EmailMessage()
    message["Subject"] = build_lead_subject(lead)
    message["From"] = config.lead_notification_from
    message["To"] = ", ".join(recipients)
    message.set_content(build_lead_body(lead))

    server_cls = smtplib.SMTP_SSL if config.smtp_use_ssl else smtplib.SMTP
    with server_cls(config.smtp_host, config.smtp_port, timeout=config.smtp_timeout) as smtp:
        if not config.smtp_use_ssl and config.smtp_use_tls:
            smtp.starttls()
        if config.smtp_username and config.smtp_password:
            smtp.login(config.smtp_username, config.smtp_password)
        smtp.send_message(message)
    logger.info("Lead email sent via SMTP to %s", ", ".join(recipients))


def send_lead_email(lead: LeadRecord, config: Settings) -> str:
    """Send the lead summary and return the transport used."""
    recipients = config.lead_recipients
    if not recipients:
        raise ValueError("LEAD_EMAIL is empty; no recipient for the lead email.")

    transport = email_transport(config)
    if transport == "resend":
        send_via_resend(lead, recipients, config)
    elif transport == "smtp":
        send_via_smtp(lead, recipients, config)
    else:
        raise ValueError("No email transport configured.")
    return transport
