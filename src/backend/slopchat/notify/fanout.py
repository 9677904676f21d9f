from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from slopchat.config import Settings
from slopchat.models.lead import LeadRecord
from slopchat.notify.channels import (
    ChannelResult,
    ChannelRole,
    ChatOpsChannel,
    DeliveryStatus,
    EmailChannel,
    LeadChannel,
    OutboundWebhookChannel,
    WorkflowChannel,
)
from slopchat.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DeliveryReport:
    results: List[ChannelResult] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return any(result.status == DeliveryStatus.DELIVERED for result in self.results)

    @property
    def acknowledgment(self) -> Optional[str]:
        for result in self.results:
            if result.status == DeliveryStatus.DELIVERED and result.acknowledgment:
                return result.acknowledgment
        return None

    @property
    def priority(self) -> Optional[str]:
        for result in self.results:
            if result.priority:
                return result.priority
        return None

    @property
    def reference(self) -> Optional[str]:
        for result in self.results:
            if result.reference:
                return result.reference
        return None

    def summary(self) -> str:
        return ", ".join(f"{result.channel}={result.status.value}" for result in self.results)


class LeadDispatcher:
    """Delivers a lead to every channel in order, one failure boundary per channel.

    Fallback channels run only when no primary channel delivered. Side channels
    always run when configured.
    """

    def __init__(self, channels: Sequence[LeadChannel]):
        self.channels = list(channels)

    def _attempt(self, channel: LeadChannel, lead: LeadRecord) -> ChannelResult:
        try:
            result = channel.send(lead)
        except Exception as exc:
            logger.exception("Lead channel %s failed for email=%s", channel.name, lead.email)
            return ChannelResult(channel.name, DeliveryStatus.FAILED, str(exc))
        logger.info("Lead channel %s delivered: %s", channel.name, result.detail)
        return result

    def dispatch(self, lead: LeadRecord) -> DeliveryReport:
        report = DeliveryReport()
        primary_delivered = False
        for channel in self.channels:
            if not channel.is_configured():
                logger.debug("Lead channel %s is not configured; skipping.", channel.name)
                report.results.append(
                    ChannelResult(channel.name, DeliveryStatus.SKIPPED, "not configured")
                )
                continue
            if channel.role == ChannelRole.FALLBACK and primary_delivered:
                report.results.append(
                    ChannelResult(channel.name, DeliveryStatus.SKIPPED, "primary delivered")
                )
                continue

            result = self._attempt(channel, lead)
            report.results.append(result)
            if channel.role == ChannelRole.PRIMARY and result.status == DeliveryStatus.DELIVERED:
                primary_delivered = True

        if report.delivered:
            logger.info("Lead fan-out for email=%s: %s", lead.email, report.summary())
        else:
            logger.error(
                "Lead not delivered to any channel: name=%s email=%s event_type=%s (%s)",
                lead.name,
                lead.email,
                lead.event_type,
                report.summary(),
            )
        return report


def build_channels(config: Settings) -> List[LeadChannel]:
    return [
        ChatOpsChannel(config),
        WorkflowChannel(config),
        EmailChannel(config),
        OutboundWebhookChannel(config),
    ]


def build_lead_dispatcher(config: Settings) -> LeadDispatcher:
    return LeadDispatcher(build_channels(config))
