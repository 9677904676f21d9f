"""Terminal version of the chat widget, useful for poking a running backend."""

import argparse
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1] / "src" / "backend"
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from slopchat.client.session import CONTACT_FORM_DELAY, ChatSession


def _prompt(label: str, required: bool = False) -> str:
    while True:
        value = input(f"{label}{' *' if required else ' (optional)'}: ").strip()
        if value or not required:
            return value


def _contact_form(session: ChatSession) -> None:
    wait = session.seconds_until_contact_form()
    if wait:
        time.sleep(wait)
    print("\nAlmost there! Share your details and an event specialist will reach out within 24 hours.")
    print("(leave the name empty to keep chatting)")
    name = input("Name *: ").strip()
    if not name:
        session.dismiss_contact_form()
        return
    email = _prompt("Email", required=True)
    phone = _prompt("Phone")
    if session.submit_lead(name, email, phone):
        print(f"\nassistant: {session.transcript[-1]['content']}")
    else:
        print("\nWe couldn't send your details. Let's keep chatting and try again.")
        session.dismiss_contact_form()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Chat with the SlopGPT assistant.")
    parser.add_argument("--url", default="http://localhost:8000", help="Backend base URL")
    parser.add_argument(
        "--form-delay",
        type=float,
        default=CONTACT_FORM_DELAY,
        help="Seconds before the contact form opens",
    )
    parser.add_argument(
        "--contact-email",
        default=None,
        help="Address shown when the backend is unreachable (defaults to CONTACT_EMAIL)",
    )
    args = parser.parse_args(argv)

    session = ChatSession(
        args.url, contact_form_delay=args.form_delay, contact_email=args.contact_email
    )
    print(f"assistant: {session.transcript[0]['content']}")
    while not session.lead_submitted:
        try:
            text = input("\nyou: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        reply = session.send(text)
        if reply is None:
            continue
        print(f"\nassistant: {reply}")
        if session.contact_form_scheduled:
            _contact_form(session)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
