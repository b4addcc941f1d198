"""
End-to-end dispatcher behavior with in-memory fakes.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager

from app.application.use_cases.reply_composer import text
from app.domain.entities.booking import BookingStatus
from app.domain.entities.booking_state import BookingStage
from app.domain.entities.message import Message, MessageKind
from app.domain.entities.session import ActiveFlow
from app.domain.entities.turn import Language

USER = "962790000001"


def _book_until_service(h, user: str = USER) -> None:
    h.say("احجز", user=user)
    h.tap("slot_6pm", user=user)
    h.say("أحمد", user=user)
    h.say("0785050875", user=user)


def test_booking_request_shows_slot_menu(harness):
    harness.say("احجز")
    session = harness.session()
    assert session.active_flow == ActiveFlow.BOOKING
    assert session.booking.stage == BookingStage.AWAIT_SLOT
    assert len(harness.platform.menus()) == 1
    assert harness.platform.menus()[0].options[0].id == "slot_3pm"


def test_full_booking_persists_once_and_resets(harness):
    _book_until_service(harness)
    assert harness.session().booking.stage == BookingStage.AWAIT_SERVICE

    harness.say("فحص عام")

    [record] = harness.bookings.all()
    assert (record.name, record.phone, record.service, record.appointment_slot) == ("أحمد", "0785050875", "فحص عام", "6 PM")
    assert record.created_at is not None
    assert record.created_at.tzinfo is not None
    assert harness.bookings.append_calls == 1
    assert harness.session().active_flow == ActiveFlow.NONE
    assert harness.platform.texts()[-1].startswith("✅")


def test_plain_no_at_service_step_redisplays_menu_without_booking(harness):
    _book_until_service(harness)
    harness.platform.clear()

    harness.say("لا")

    assert harness.bookings.all() == []
    assert harness.bookings.append_calls == 0
    session = harness.session()
    assert session.active_flow == ActiveFlow.BOOKING
    assert session.booking.stage == BookingStage.AWAIT_SERVICE
    assert harness.platform.menus()[-1].options[0].id.startswith("service_")


def test_booking_request_naming_closed_day_sends_notice_without_starting_flow(harness):
    harness.say("احجز يوم الجمعة")

    assert harness.platform.texts()[0] == text("closed_day", Language.AR)
    assert harness.platform.menus()[0].options[0].id == "slot_3pm"
    assert harness.session().active_flow == ActiveFlow.NONE


def test_message_after_completion_does_not_persist_again(harness):
    _book_until_service(harness)
    harness.say("فحص عام")
    harness.say("فحص عام")
    assert harness.bookings.append_calls == 1


def test_arabic_digit_phone_accepted(harness):
    harness.say("احجز")
    harness.tap("slot_3pm")
    harness.say("سارة")
    harness.say("٠٧٨٥٠٥٠٨٧٥")
    session = harness.session()
    assert session.booking.phone == "0785050875"
    assert session.booking.stage == BookingStage.AWAIT_SERVICE


def test_cancel_mid_booking_switches_flow(harness):
    harness.say("احجز")
    harness.tap("slot_3pm")
    harness.platform.clear()

    harness.say("الغاء")

    session = harness.session()
    assert session.active_flow == ActiveFlow.CANCELLATION
    assert session.booking is None
    assert harness.platform.texts() == [text("cancel_ask_phone", Language.AR)]
    assert harness.bookings.append_calls == 0


def test_cancellation_not_found(harness):
    harness.say("الغاء")
    harness.say("0785050875")
    assert harness.platform.texts()[-1] == text("cancel_not_found", Language.AR)
    assert harness.session().active_flow == ActiveFlow.NONE
    assert harness.bookings.all() == []


def test_cancellation_marks_latest_booking(harness):
    _book_until_service(harness)
    harness.say("فحص عام")
    _book_until_service(harness)
    harness.say("تنظيف الأسنان")

    harness.say("cancel")
    harness.say("0785050875")

    first, second = harness.bookings.all()
    assert first.status == BookingStatus.BOOKED
    assert second.status == BookingStatus.CANCELLED
    assert harness.platform.texts()[-1] == text("cancel_confirmed", Language.EN)


def test_persistence_failure_keeps_collected_data(harness):
    _book_until_service(harness)
    harness.bookings.fail = True

    harness.say("فحص عام")

    session = harness.session()
    assert session.active_flow == ActiveFlow.BOOKING
    assert session.booking.stage == BookingStage.AWAIT_SERVICE
    assert session.booking.phone == "0785050875"
    assert harness.platform.texts()[-1] == text("persistence_retry", Language.AR)
    assert not any(t.startswith("✅") for t in harness.platform.texts())

    harness.bookings.fail = False
    harness.say("فحص عام")
    assert len(harness.bookings.all()) == 1
    assert harness.session().active_flow == ActiveFlow.NONE


def test_persistence_failure_during_cancellation_keeps_flow(harness):
    harness.say("الغاء")
    harness.bookings.fail = True
    harness.say("0785050875")
    assert harness.session().active_flow == ActiveFlow.CANCELLATION
    assert harness.platform.texts()[-1] == text("persistence_retry", Language.AR)


def test_voice_message_is_routed_like_text(harness):
    harness.transcriber.transcripts["media-1"] = "ابي احجز موعد"
    harness.voice("media-1")
    assert harness.session().active_flow == ActiveFlow.BOOKING


def test_transcription_failure_sends_retry_and_leaves_session(harness):
    harness.say("احجز")
    before = harness.session()
    harness.voice("missing-media")
    assert harness.session() == before
    assert harness.platform.texts()[-1] == text("transcription_retry", Language.AR)


def test_duplicate_delivery_is_processed_once(harness):
    message = Message(id="wamid.dup", sender_id=USER, kind=MessageKind.TEXT, timestamp=1, platform="test", text="احجز")
    harness.use_case.handle(message)
    harness.use_case.handle(message)
    assert len(harness.platform.menus()) == 1


def test_abuse_guard_resets_flow(harness):
    harness.say("احجز")
    harness.tap("slot_3pm")
    harness.platform.clear()

    harness.say("you are an ass")

    assert harness.session().active_flow == ActiveFlow.NONE
    assert harness.platform.texts() == [text("abuse_redirect", Language.EN, clinic="Test Clinic")]


def test_ai_fallback_and_failure(harness):
    harness.say("tell me a joke")
    assert harness.platform.texts()[-1] == "AI answer"
    assert harness.llm.questions == ["tell me a joke"]

    harness.llm.fail_answer = True
    harness.say("tell me another joke")
    assert harness.platform.texts()[-1] == text("assistant_unavailable", Language.EN)


def test_offers_send_images(harness):
    harness.say("عندكم عروض")
    images = [p for _, kind, p in harness.platform.sent if kind == "image"]
    assert images == list(harness.content.offer_images)
    assert harness.session().active_flow == ActiveFlow.NONE


def test_location_sends_link_first(harness):
    harness.say("where are you")
    assert harness.platform.texts()[0] == harness.content.location_link


def test_shortcut_from_idle_starts_at_name(harness):
    harness.say("9")
    session = harness.session()
    assert session.booking.appointment_slot == "9 PM"
    assert session.booking.stage == BookingStage.AWAIT_NAME


def test_stale_service_tap_from_idle_starts_at_slot(harness):
    harness.tap("service_فحص_عام")
    session = harness.session()
    assert session.active_flow == ActiveFlow.BOOKING
    assert session.booking.stage == BookingStage.AWAIT_SLOT
    assert harness.platform.texts()[0] == text("finish_steps_first", Language.AR)


def test_language_sticks_for_digits_only_turns(harness):
    harness.say("I want to book")
    harness.tap("slot_6pm")
    harness.say("John Smith")
    harness.say("0785050875")
    assert harness.session().last_language == Language.EN
    assert harness.platform.texts()[-1] == text("choose_service", Language.EN)


def test_different_users_are_independent(harness):
    harness.say("احجز", user="u1")
    harness.say("where", user="u2")
    assert harness.session("u1").active_flow == ActiveFlow.BOOKING
    assert harness.session("u2").active_flow == ActiveFlow.NONE


def test_same_user_turns_are_serialized(harness):
    """Two turns racing for one user give the same state as arrival order."""
    harness.say("احجز")
    harness.tap("slot_6pm")
    harness.say("أحمد")

    store = harness.store
    inside = 0
    overlap = []
    guard = threading.Lock()
    entered = threading.Event()
    original_lock = store.lock

    @contextmanager
    def tracking_lock(user_id):
        nonlocal inside
        with original_lock(user_id):
            with guard:
                inside += 1
                overlap.append(inside)
            entered.set()
            time.sleep(0.02)
            try:
                yield
            finally:
                with guard:
                    inside -= 1

    store.lock = tracking_lock

    threads = [
        threading.Thread(target=harness.say, args=("0785050875",)),
        threading.Thread(target=harness.say, args=("فحص عام",)),
    ]
    threads[0].start()
    entered.wait(timeout=5)
    threads[1].start()
    for t in threads:
        t.join()

    assert max(overlap) == 1
    assert harness.bookings.append_calls == 1
    assert harness.session().active_flow == ActiveFlow.NONE
