#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no WhatsApp).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable user id for the session
- Sends your typed messages through the same HandleIncomingMessageUseCase
- Prints every outbound text, menu and image, then the session state
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.ports.message_platform import MessagePlatformPort  # noqa: E402
from app.application.use_cases.booking import BookingUseCase  # noqa: E402
from app.application.use_cases.cancellation import CancellationUseCase  # noqa: E402
from app.application.use_cases.classify_intent import ClassifyIntentUseCase  # noqa: E402
from app.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase  # noqa: E402
from app.application.use_cases.normalize_input import NormalizeInputUseCase  # noqa: E402
from app.application.use_cases.reply_composer import ReplyComposer  # noqa: E402
from app.application.use_cases.route_turn import RouteTurnUseCase  # noqa: E402
from app.application.use_cases.send_reply import SendReplyUseCase  # noqa: E402
from app.application.utils.validators import NameValidator  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.domain.entities.actions import SelectionMenu  # noqa: E402
from app.domain.entities.message import Message, MessageKind  # noqa: E402
from app.infrastructure.knowledge.clinic_content_data import build_clinic_content  # noqa: E402
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore  # noqa: E402
from app.infrastructure.persistence.memory_booking_store import MemoryBookingStore  # noqa: E402
from app.infrastructure.store.memory_store import MemorySessionStore  # noqa: E402
from app.infrastructure.transcription.mock_transcriber import MockTranscriber  # noqa: E402
from app.wiring.dependencies import get_llm  # noqa: E402


class ConsolePlatform(MessagePlatformPort):
    def send_text(self, recipient_id: str, text: str) -> None:
        print(f"(bot) {text}")

    def send_selection_menu(self, recipient_id: str, menu: SelectionMenu) -> None:
        print(f"(menu) {menu.body}")
        for option in menu.options:
            print(f"   [{option.id}] {option.title}")

    def send_image(self, recipient_id: str, url: str) -> None:
        print(f"(image) {url}")


def _print_header(user_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /tap <id>, /voice <text>, /state, /bookings, /new, /quit, /help")
    print("-" * 60)


def main() -> None:
    user_id = os.getenv("CHAT_USER_ID", "962700000001")
    transcripts: dict[str, str] = {}
    store = MemorySessionStore(idle_timeout_seconds=settings.SESSION_IDLE_TIMEOUT_SECONDS)
    bookings = MemoryBookingStore()
    content = build_clinic_content()
    catalog = ServiceCatalogStore()
    llm = get_llm()
    composer = ReplyComposer(content=content, catalog=catalog)
    cancellation = CancellationUseCase(composer=composer)
    booking = BookingUseCase(composer, NameValidator(llm), catalog, content, cancellation)
    use_case = HandleIncomingMessageUseCase(
        store=store,
        normalizer=NormalizeInputUseCase(MockTranscriber(transcripts)),
        router=RouteTurnUseCase(ClassifyIntentUseCase(content), booking, cancellation, composer),
        send_reply=SendReplyUseCase(ConsolePlatform(), enabled=True),
        llm=llm,
        bookings=bookings,
        composer=composer,
        timezone=settings.CLINIC_TIMEZONE,
    )
    _print_header(user_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd, _, arg = user_text.partition(" ")
        cmd = cmd.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /tap <id>     -> press a button or list row, e.g. /tap slot_6pm")
            print("  /voice <text> -> send a voice note whose transcript is <text>")
            print("  /state        -> show the session")
            print("  /bookings     -> show stored bookings")
            print("  /new          -> start as a new user")
            print("  /quit         -> exit")
            continue
        if cmd == "/new":
            user_id = f"9627{int(time.time()) % 100000000:08d}"
            print(f"New user_id: {user_id}")
            continue
        if cmd == "/state":
            print(store.get(user_id))
            continue
        if cmd == "/bookings":
            for record in bookings.all():
                print(record)
            continue

        message_id = f"local_{int(time.time() * 1000)}"
        common = {"id": message_id, "sender_id": user_id, "timestamp": int(time.time()), "platform": "local"}
        if cmd == "/tap":
            message = Message(kind=MessageKind.SELECTION, selection_id=arg.strip(), **common)
        elif cmd == "/voice":
            transcripts[message_id] = arg
            message = Message(kind=MessageKind.VOICE, media_id=message_id, **common)
        else:
            message = Message(kind=MessageKind.TEXT, text=user_text, **common)

        use_case.handle(message)
        print("-" * 60)


if __name__ == "__main__":
    main()
