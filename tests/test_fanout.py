from unittest.mock import patch

from conftest import DummyResponse, make_settings
from slopchat.models.lead import LeadRecord
from slopchat.notify.channels import (
    ChannelResult,
    ChannelRole,
    DeliveryStatus,
    LeadChannel,
    OutboundWebhookChannel,
    WorkflowChannel,
)
from slopchat.notify.fanout import LeadDispatcher

LEAD = LeadRecord(name="Jane Doe", email="jane@x.com", event_type="birthday")


class FakeChannel(LeadChannel):
    def __init__(self, name, role, outcome="delivered", configured=True):
        super().__init__(make_settings())
        self.name = name
        self.role = role
        self.outcome = outcome
        self.configured = configured
        self.calls = 0

    def is_configured(self):
        return self.configured

    def send(self, lead):
        self.calls += 1
        if self.outcome == "raise":
            raise RuntimeError(f"{self.name} exploded")
        return self._delivered(acknowledgment=f"ack from {self.name}")


def test_fallback_runs_only_when_primaries_fail():
    primary = FakeChannel("chatops", ChannelRole.PRIMARY, outcome="raise")
    fallback = FakeChannel("email", ChannelRole.FALLBACK)
    report = LeadDispatcher([primary, fallback]).dispatch(LEAD)
    assert fallback.calls == 1
    assert report.delivered is True
    assert [result.status for result in report.results] == [
        DeliveryStatus.FAILED,
        DeliveryStatus.DELIVERED,
    ]


def test_fallback_skipped_after_primary_delivers():
    primary = FakeChannel("chatops", ChannelRole.PRIMARY)
    fallback = FakeChannel("email", ChannelRole.FALLBACK)
    report = LeadDispatcher([primary, fallback]).dispatch(LEAD)
    assert fallback.calls == 0
    assert report.results[1] == ChannelResult(
        "email", DeliveryStatus.SKIPPED, "primary delivered"
    )


def test_fallback_runs_when_no_primary_configured():
    primary = FakeChannel("chatops", ChannelRole.PRIMARY, configured=False)
    fallback = FakeChannel("email", ChannelRole.FALLBACK)
    LeadDispatcher([primary, fallback]).dispatch(LEAD)
    assert primary.calls == 0
    assert fallback.calls == 1


def test_failures_never_block_later_channels():
    channels = [
        FakeChannel("chatops", ChannelRole.PRIMARY, outcome="raise"),
        FakeChannel("workflow", ChannelRole.PRIMARY, outcome="raise"),
        FakeChannel("email", ChannelRole.FALLBACK, outcome="raise"),
        FakeChannel("webhook", ChannelRole.SIDE, outcome="raise"),
    ]
    report = LeadDispatcher(channels).dispatch(LEAD)
    assert [channel.calls for channel in channels] == [1, 1, 1, 1]
    assert report.delivered is False
    assert report.acknowledgment is None
    assert "webhook exploded" in report.results[-1].detail


def test_acknowledgment_comes_from_first_delivering_channel():
    channels = [
        FakeChannel("chatops", ChannelRole.PRIMARY, outcome="raise"),
        FakeChannel("workflow", ChannelRole.PRIMARY),
    ]
    report = LeadDispatcher(channels).dispatch(LEAD)
    assert report.acknowledgment == "ack from workflow"


@patch("slopchat.notify.channels.requests.post")
def test_workflow_channel_reads_classification(mock_post):
    mock_post.return_value = DummyResponse({"id": 42, "priority": "high", "message": ""})
    channel = WorkflowChannel(make_settings(workflow_webhook_url="https://automation.test/hook"))
    result = channel.send(LEAD)
    assert result.status == DeliveryStatus.DELIVERED
    assert result.reference == "42"
    assert result.priority == "high"
    assert result.acknowledgment is None
    assert mock_post.call_args.kwargs["json"] == {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "eventType": "birthday",
    }


@patch("slopchat.notify.channels.requests.post")
def test_outbound_webhook_tags_source_and_timestamp(mock_post):
    mock_post.return_value = DummyResponse(None, status_code=204)
    channel = OutboundWebhookChannel(make_settings(lead_webhook_url="https://crm.test/in"))
    channel.send(LEAD)
    payload = mock_post.call_args.kwargs["json"]
    assert payload["source"] == "slopgpt-chat"
    assert payload["timestamp"].endswith("+00:00")
    assert payload["eventType"] == "birthday"
