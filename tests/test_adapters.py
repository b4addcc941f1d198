"""
Outbound adapters against httpx.MockTransport, plus the model answer parser.
"""

from __future__ import annotations

import json

import httpx
import pytest
from openai import OpenAI

from app.application.exceptions import PersistenceUnavailable, TranscriptionUnavailable
from app.application.use_cases.send_reply import SendReplyUseCase
from app.domain.entities.actions import MenuOption, SelectionMenu, SendImage, SendText
from app.domain.entities.booking import BookingRecord, BookingStatus
from app.domain.entities.turn import Language
from app.infrastructure.llm.openai_llm import parse_yes_no
from app.infrastructure.persistence.supabase_booking_store import SupabaseBookingStore
from app.infrastructure.transcription.mock_transcriber import MockTranscriber
from app.infrastructure.transcription.whisper_transcriber import WhisperTranscriber
from app.infrastructure.whatsapp.whatsapp_client import WhatsAppClient, build_interactive
from app.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform

from tests.conftest import FakePlatform

SLOTS = SelectionMenu(
    body="Choose",
    options=(MenuOption("slot_3pm", "3 PM"), MenuOption("slot_6pm", "6 PM"), MenuOption("slot_9pm", "9 PM")),
)


def test_three_plain_options_become_buttons():
    interactive = build_interactive(SLOTS)
    assert interactive["type"] == "button"
    assert [b["reply"]["id"] for b in interactive["action"]["buttons"]] == ["slot_3pm", "slot_6pm", "slot_9pm"]


def test_service_catalog_becomes_sectioned_list(composer):
    interactive = build_interactive(composer.service_menu(Language.AR))
    assert interactive["type"] == "list"
    assert interactive["header"]["type"] == "text"
    rows = [row for section in interactive["action"]["sections"] for row in section["rows"]]
    assert len(rows) == 10
    assert rows[0]["id"] == "service_فحص_عام"
    assert all(len(row["title"]) <= 24 for row in rows)


def test_whatsapp_client_posts_text():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"messages": [{"id": "wamid.x"}]})

    client = WhatsAppClient("tok", "123", http_client=httpx.Client(transport=httpx.MockTransport(handler)))
    client.send_text("962790000001", "hello")

    [request] = seen
    assert request.url.path == "/v21.0/123/messages"
    assert request.headers["Authorization"] == "Bearer tok"
    body = json.loads(request.content)
    assert body["to"] == "962790000001"
    assert body["text"]["body"] == "hello"


def test_platform_swallows_send_errors():
    transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": {"code": 131047}}))
    platform = WhatsAppPlatform(WhatsAppClient("tok", "123", http_client=httpx.Client(transport=transport)))
    platform.send_text("962790000001", "hello")
    platform.send_image("962790000001", "https://img.example/a.jpg")


def _supabase(handler) -> SupabaseBookingStore:
    return SupabaseBookingStore(
        "https://proj.supabase.co/",
        "key",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_supabase_find_latest_query():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {
                    "id": 7,
                    "name": "أحمد",
                    "phone": "0785050875",
                    "service": "فحص عام",
                    "appointment": "6 PM",
                    "status": None,
                    "created_at": "2025-01-02T10:00:00+03:00",
                }
            ],
        )

    record = _supabase(handler).find_latest_booking_by_phone("0785050875")

    params = seen[0].url.params
    assert seen[0].url.path == "/rest/v1/bookings"
    assert params["phone"] == "eq.0785050875"
    assert params["order"] == "created_at.desc,id.desc"
    assert params["limit"] == "1"
    assert record.id == "7"
    assert record.appointment_slot == "6 PM"
    assert record.status == BookingStatus.BOOKED


def test_supabase_append_and_cancel():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "POST":
            row = json.loads(request.content)[0]
            return httpx.Response(201, json=[{**row, "id": 1}])
        return httpx.Response(200, json=[{"id": 1, "status": "cancelled"}])

    store = _supabase(handler)
    stored = store.append_booking(BookingRecord("Sara", "0791234567", "فحص عام", "3 PM"))
    assert stored.id == "1"
    assert json.loads(seen[0].content)[0]["appointment"] == "3 PM"

    assert store.mark_cancelled("1")
    assert seen[1].method == "PATCH"
    assert seen[1].url.params["id"] == "eq.1"
    assert json.loads(seen[1].content) == {"status": "cancelled"}


def test_supabase_errors_become_persistence_unavailable():
    store = _supabase(lambda request: httpx.Response(503))
    with pytest.raises(PersistenceUnavailable):
        store.find_latest_booking_by_phone("0785050875")


@pytest.mark.parametrize(
    "reply, verdict",
    [("yes", True), ("Yes.", True), ("نعم", True), ("no", False), ("لا", False), ("maybe", None), ("", None)],
)
def test_parse_yes_no(reply, verdict):
    assert parse_yes_no(reply) is verdict


def test_mock_transcriber_raises_without_transcript():
    with pytest.raises(TranscriptionUnavailable):
        MockTranscriber().transcribe("media-1")
    assert MockTranscriber({"media-1": "hi"}).transcribe("media-1") == "hi"


def test_send_reply_respects_auto_reply_switch():
    platform = FakePlatform()
    assert not SendReplyUseCase(platform, enabled=False).execute("u1", SendText("hi"))
    assert platform.sent == []

    sender = SendReplyUseCase(platform, enabled=True)
    assert sender.execute("u1", SendText("hi"))
    assert sender.execute("u1", SendImage("https://img.example/a.jpg"))
    assert [kind for _, kind, _ in platform.sent] == ["text", "image"]


def test_whisper_treats_unreadable_media_lookup_as_unavailable():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>upstream error</html>"))
    media = WhatsAppClient("tok", "123", http_client=httpx.Client(transport=transport))
    transcriber = WhisperTranscriber(media, client=OpenAI(api_key="test", base_url="http://llm.invalid/v1"))

    with pytest.raises(TranscriptionUnavailable):
        transcriber.transcribe("media-1")
