"""
Lead delivery channels.

Each channel knows whether it is configured and how to push one lead to its
destination. ``send`` raises on any failure; the dispatcher owns the failure
boundary around every attempt.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import requests

from slopchat.config import Settings
from slopchat.models.lead import LeadRecord
from slopchat.utils import mailer


class ChannelRole(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    SIDE = "side"


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ChannelResult:
    channel: str
    status: DeliveryStatus
    detail: str = ""
    priority: Optional[str] = None
    acknowledgment: Optional[str] = None
    reference: Optional[str] = None


class LeadChannel:
    name = "channel"
    role = ChannelRole.PRIMARY

    def __init__(self, config: Settings):
        self.config = config

    def is_configured(self) -> bool:
        raise NotImplementedError

    def send(self, lead: LeadRecord) -> ChannelResult:
        raise NotImplementedError

    def _delivered(self, detail: str = "ok", **extra: Any) -> ChannelResult:
        return ChannelResult(self.name, DeliveryStatus.DELIVERED, detail, **extra)


def _to_slack_message(lead: LeadRecord) -> Dict[str, Any]:
    text = ":tada: *New SlopGPT lead*\n\n"
    text += f"*Name:* {lead.name}\n"
    text += f"*Email:* {lead.email}\n"
    text += f"*Phone:* {lead.phone or 'Not provided'}\n\n"
    text += f"*Event:* {lead.event_type or 'Not specified'}\n"
    text += f"*Theme:* {lead.theme or 'Not specified'}\n"
    text += f"*Date:* {lead.date or 'Not specified'}\n"
    text += f"*Guests:* {lead.guest_count or 'Not specified'}\n"
    text += f"*Location:* {lead.location or 'Not specified'}\n"
    text += f"*Budget:* {lead.budget or 'Not discussed'}\n"
    return {"text": text}


class ChatOpsChannel(LeadChannel):
    name = "chatops"
    role = ChannelRole.PRIMARY

    def is_configured(self) -> bool:
        return bool(self.config.slack_webhook_url)

    def send(self, lead: LeadRecord) -> ChannelResult:
        response = requests.post(
            self.config.slack_webhook_url,
            json=_to_slack_message(lead),
            timeout=self.config.webhook_timeout,
        )
        response.raise_for_status()
        return self._delivered(f"HTTP {response.status_code}")


class WorkflowChannel(LeadChannel):
    """Automation webhook that stores the lead and may classify it."""

    name = "workflow"
    role = ChannelRole.PRIMARY

    def is_configured(self) -> bool:
        return bool(self.config.workflow_webhook_url)

    def send(self, lead: LeadRecord) -> ChannelResult:
        response = requests.post(
            self.config.workflow_webhook_url,
            json=lead.to_payload(),
            timeout=self.config.webhook_timeout,
        )
        response.raise_for_status()
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            return self._delivered(f"HTTP {response.status_code}")

        reference = body.get("id")
        priority = body.get("priority")
        message = body.get("message")
        return self._delivered(
            f"HTTP {response.status_code}",
            reference=str(reference) if reference is not None else None,
            priority=str(priority) if priority else None,
            acknowledgment=message if isinstance(message, str) and message.strip() else None,
        )


class EmailChannel(LeadChannel):
    name = "email"
    role = ChannelRole.FALLBACK

    def is_configured(self) -> bool:
        return mailer.email_transport(self.config) is not None

    def send(self, lead: LeadRecord) -> ChannelResult:
        transport = mailer.send_lead_email(lead, self.config)
        return self._delivered(f"sent via {transport}")


class OutboundWebhookChannel(LeadChannel):
    name = "webhook"
    role = ChannelRole.SIDE

    def is_configured(self) -> bool:
        return bool(self.config.lead_webhook_url)

    def send(self, lead: LeadRecord) -> ChannelResult:
        payload = lead.to_payload()
        payload["timestamp"] = datetime.now(timezone.utc).isoformat()
        payload["source"] = self.config.lead_source
        response = requests.post(
            self.config.lead_webhook_url,
            json=payload,
            timeout=self.config.webhook_timeout,
        )
        response.raise_for_status()
        return self._delivered(f"HTTP {response.status_code}")
