"""
Chat widget orchestration.

``ChatSession`` mirrors what the browser chat view does: it owns the visible
transcript, calls ``/api/chat`` for every visitor message, decides when to
show the contact form, and posts the lead to ``/api/lead``.
"""

import time
from typing import Any, Callable, Dict, List, Optional

import requests
from requests import RequestException

from slopchat.config import settings
from slopchat.conversation.persona import INITIAL_GREETING
from slopchat.conversation.state import ConversationState, asks_for_contact
from slopchat.utils.logger import get_logger

logger = get_logger(__name__)

CONTACT_FORM_DELAY = 1.0


def render_transcript(turns: List[Dict[str, str]]) -> str:
    return "\n".join(f"{turn['role']}: {turn['content']}" for turn in turns)


class ChatSession:
    def __init__(
        self,
        base_url: str,
        http: Optional[requests.Session] = None,
        contact_form_delay: float = CONTACT_FORM_DELAY,
        contact_email: Optional[str] = None,
        timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.contact_form_delay = contact_form_delay
        self.contact_email = contact_email or settings.contact_email
        self.timeout = timeout
        self.clock = clock

        self.transcript: List[Dict[str, str]] = [
            {"role": "assistant", "content": INITIAL_GREETING}
        ]
        self.state = ConversationState.GATHERING
        self.busy = False
        self.lead_submitted = False
        self.conversation_summary = ""
        self._form_due_at: Optional[float] = None

    @property
    def fallback_message(self) -> str:
        return (
            "I'm having a bit of trouble connecting right now. You can also reach us "
            f"directly at {self.contact_email} - we'd love to hear from you!"
        )

    def _post(self, path: str, payload: Dict[str, Any]) -> requests.Response:
        return self.http.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)

    def _append(self, role: str, content: str) -> None:
        self.transcript.append({"role": role, "content": content})

    def send(self, text: str) -> Optional[str]:
        """Send one visitor message and return the assistant text shown for it."""
        content = text.strip()
        if not content or self.busy or self.lead_submitted:
            return None

        self._append("user", content)
        self.busy = True
        try:
            # The greeting stays client-side.
            response = self._post("/api/chat", {"messages": self.transcript[1:]})
            data = response.json()
        except (RequestException, ValueError):
            logger.exception("Chat request failed")
            data = None
        finally:
            self.busy = False

        reply = data.get("message") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            self._append("assistant", self.fallback_message)
            return self.fallback_message

        self._append("assistant", reply)
        state = data.get("state")
        if state in {member.value for member in ConversationState}:
            self.state = ConversationState(state)

        if asks_for_contact(reply) or self.state == ConversationState.CONTACT_REQUESTED:
            self.conversation_summary = render_transcript(self.transcript)
            if self._form_due_at is None:
                self._form_due_at = self.clock() + self.contact_form_delay
        return reply

    @property
    def contact_form_scheduled(self) -> bool:
        return self._form_due_at is not None and not self.lead_submitted

    def contact_form_open(self) -> bool:
        if not self.contact_form_scheduled:
            return False
        return self.clock() >= self._form_due_at

    def seconds_until_contact_form(self) -> Optional[float]:
        if not self.contact_form_scheduled:
            return None
        return max(0.0, self._form_due_at - self.clock())

    def dismiss_contact_form(self) -> None:
        """Visitor chose to keep chatting; the next contact cue reopens the form."""
        self._form_due_at = None

    def submit_lead(self, name: str, email: str, phone: str = "", **details: str) -> bool:
        if not name.strip() or not email.strip():
            return False

        lead = {
            "name": name,
            "email": email,
            "phone": phone,
            "eventType": details.get("event_type", ""),
            "theme": details.get("theme", ""),
            "date": details.get("date", ""),
            "guestCount": details.get("guest_count", ""),
            "location": details.get("location", ""),
            "budget": details.get("budget", ""),
            "conversationSummary": self.conversation_summary
            or render_transcript(self.transcript),
        }
        try:
            response = self._post("/api/lead", lead)
        except RequestException:
            logger.exception("Lead submission failed")
            return False
        if not response.ok:
            logger.warning("Lead submission rejected with HTTP %s", response.status_code)
            return False

        self.lead_submitted = True
        self._form_due_at = None
        self.state = ConversationState.COMPLETE
        self._append(
            "assistant",
            f"Thanks {name}! Our event specialists will be in touch at {email} "
            "within 24 hours. We're excited to help bring your vision to life!",
        )
        return True
