"""Qualification progress inferred from the transcript and the latest reply."""

import re
from enum import Enum
from typing import Sequence

from slopchat.utils.text import normalize_text

CONTACT_PHRASES = ("reach out", "get in touch", "i've got everything")
CONFIRM_PHRASES = (
    "to confirm",
    "to recap",
    "let me summarize",
    "here's what i have",
    "does that sound right",
    "does that look right",
    "is that correct",
    "did i get that right",
)
EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
# Digits joined only by phone punctuation, e.g. "+1 (555) 010-0199".
PHONE_RE = re.compile(r"\+?\(?\d[\d\s().-]*\d")


class ConversationState(str, Enum):
    GATHERING = "gathering"
    CONFIRMING = "confirming"
    CONTACT_REQUESTED = "contact_requested"
    COMPLETE = "complete"


def _lowered(text: str) -> str:
    # Models emit typographic apostrophes as often as plain ones.
    return normalize_text(text).lower().replace("’", "'")


def asks_for_name_and_email(reply: str) -> bool:
    lowered = _lowered(reply)
    return "email" in lowered and "name" in lowered


def asks_for_contact(reply: str) -> bool:
    if asks_for_name_and_email(reply):
        return True
    lowered = _lowered(reply)
    return any(phrase in lowered for phrase in CONTACT_PHRASES)


def asks_for_confirmation(reply: str) -> bool:
    lowered = _lowered(reply)
    return any(phrase in lowered for phrase in CONFIRM_PHRASES)


def looks_like_contact(message: str) -> bool:
    if EMAIL_RE.search(message):
        return True
    for match in PHONE_RE.finditer(message):
        if sum(ch.isdigit() for ch in match.group()) >= 7:
            return True
    return False


def _contact_already_shared(turns: Sequence[dict[str, str]]) -> bool:
    requested = False
    for turn in turns:
        content = turn.get("content", "")
        if turn.get("role") == "assistant":
            requested = requested or asks_for_name_and_email(content)
        elif requested and looks_like_contact(content):
            return True
    return False


def infer_state(turns: Sequence[dict[str, str]], reply: str) -> ConversationState:
    if _contact_already_shared(turns):
        return ConversationState.COMPLETE
    if asks_for_contact(reply):
        return ConversationState.CONTACT_REQUESTED
    if asks_for_confirmation(reply):
        return ConversationState.CONFIRMING
    return ConversationState.GATHERING
