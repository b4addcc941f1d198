from __future__ import annotations

import itertools
import threading

import pytest

from app.application.exceptions import LLMUpstreamError, PersistenceUnavailable, TranscriptionUnavailable
from app.application.ports.llm import LLMPort
from app.application.ports.message_platform import MessagePlatformPort
from app.application.ports.transcription import TranscriptionPort
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.cancellation import CancellationUseCase
from app.application.use_cases.classify_intent import ClassifyIntentUseCase
from app.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from app.application.use_cases.normalize_input import NormalizeInputUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.use_cases.route_turn import RouteTurnUseCase
from app.application.use_cases.send_reply import SendReplyUseCase
from app.application.utils.validators import NameValidator
from app.domain.entities.actions import MenuOption, SelectionMenu
from app.domain.entities.clinic_content import ClinicContent
from app.domain.entities.message import Message, MessageKind
from app.domain.entities.turn import Language
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.persistence.memory_booking_store import MemoryBookingStore
from app.infrastructure.store.memory_store import MemorySessionStore


class FakePlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, object]] = []
        self._lock = threading.Lock()

    def send_text(self, recipient_id: str, text: str) -> None:
        with self._lock:
            self.sent.append((recipient_id, "text", text))

    def send_selection_menu(self, recipient_id: str, menu: SelectionMenu) -> None:
        with self._lock:
            self.sent.append((recipient_id, "menu", menu))

    def send_image(self, recipient_id: str, url: str) -> None:
        with self._lock:
            self.sent.append((recipient_id, "image", url))

    def texts(self, recipient_id: str | None = None) -> list[str]:
        return [p for r, kind, p in self.sent if kind == "text" and (recipient_id is None or r == recipient_id)]

    def menus(self, recipient_id: str | None = None) -> list[SelectionMenu]:
        return [p for r, kind, p in self.sent if kind == "menu" and (recipient_id is None or r == recipient_id)]

    def clear(self) -> None:
        self.sent.clear()


class FakeLLM(LLMPort):
    """Scriptable model: `name_verdict` is returned as-is, or raised when it is an exception."""

    def __init__(self, answer_text: str = "AI answer", name_verdict: object = True) -> None:
        self.answer_text = answer_text
        self.name_verdict = name_verdict
        self.fail_answer = False
        self.questions: list[str] = []
        self.name_checks: list[str] = []

    def answer(self, text: str, language: Language) -> str:
        self.questions.append(text)
        if self.fail_answer:
            raise LLMUpstreamError("down")
        return self.answer_text

    def is_plausible_name(self, text: str) -> bool | None:
        self.name_checks.append(text)
        if isinstance(self.name_verdict, Exception):
            raise self.name_verdict
        return self.name_verdict


class FakeBookingStore(MemoryBookingStore):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False
        self.append_calls = 0

    def append_booking(self, record):
        self.append_calls += 1
        if self.fail:
            raise PersistenceUnavailable("store down")
        return super().append_booking(record)

    def find_latest_booking_by_phone(self, phone: str):
        if self.fail:
            raise PersistenceUnavailable("store down")
        return super().find_latest_booking_by_phone(phone)


class FakeTranscriber(TranscriptionPort):
    def __init__(self, transcripts: dict[str, str] | None = None) -> None:
        self.transcripts = dict(transcripts or {})

    def transcribe(self, media_id: str) -> str:
        if media_id not in self.transcripts:
            raise TranscriptionUnavailable("unknown media")
        return self.transcripts[media_id]


CLINIC = ClinicContent(
    name="Test Clinic",
    location_link="https://maps.example/clinic",
    offer_images=("https://img.example/offer1.jpg", "https://img.example/offer2.jpg"),
    doctor_images=("https://img.example/doc1.jpg",),
    slot_options=(
        MenuOption(id="slot_3pm", title="3 PM"),
        MenuOption(id="slot_6pm", title="6 PM"),
        MenuOption(id="slot_9pm", title="9 PM"),
    ),
    slot_shortcuts={"3": "3 PM", "6": "6 PM", "9": "9 PM"},
)


class Harness:
    """The dispatcher wired to in-memory fakes."""

    def __init__(self) -> None:
        self.platform = FakePlatform()
        self.llm = FakeLLM()
        self.bookings = FakeBookingStore()
        self.transcriber = FakeTranscriber()
        self.store = MemorySessionStore()
        self.content = CLINIC
        self.catalog = ServiceCatalogStore()
        self.composer = ReplyComposer(content=self.content, catalog=self.catalog)
        self.cancellation = CancellationUseCase(composer=self.composer)
        self.booking = BookingUseCase(
            composer=self.composer,
            name_validator=NameValidator(self.llm),
            catalog=self.catalog,
            content=self.content,
            cancellation=self.cancellation,
        )
        self.router = RouteTurnUseCase(
            classifier=ClassifyIntentUseCase(self.content),
            booking=self.booking,
            cancellation=self.cancellation,
            composer=self.composer,
        )
        self.use_case = HandleIncomingMessageUseCase(
            store=self.store,
            normalizer=NormalizeInputUseCase(self.transcriber),
            router=self.router,
            send_reply=SendReplyUseCase(self.platform, enabled=True),
            llm=self.llm,
            bookings=self.bookings,
            composer=self.composer,
            timezone="Asia/Amman",
        )
        self._ids = itertools.count(1)

    def _next_id(self) -> str:
        return f"wamid.{next(self._ids)}"

    def say(self, text: str, user: str = "962790000001") -> None:
        self.use_case.handle(
            Message(id=self._next_id(), sender_id=user, kind=MessageKind.TEXT, timestamp=1700000000, platform="test", text=text)
        )

    def tap(self, selection_id: str, user: str = "962790000001") -> None:
        self.use_case.handle(
            Message(
                id=self._next_id(),
                sender_id=user,
                kind=MessageKind.SELECTION,
                timestamp=1700000000,
                platform="test",
                selection_id=selection_id,
            )
        )

    def voice(self, media_id: str, user: str = "962790000001") -> None:
        self.use_case.handle(
            Message(id=self._next_id(), sender_id=user, kind=MessageKind.VOICE, timestamp=1700000000, platform="test", media_id=media_id)
        )

    def session(self, user: str = "962790000001"):
        return self.store.get(user)


@pytest.fixture
def clinic() -> ClinicContent:
    return CLINIC


@pytest.fixture
def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore()


@pytest.fixture
def composer(clinic, catalog) -> ReplyComposer:
    return ReplyComposer(content=clinic, catalog=catalog)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def harness() -> Harness:
    return Harness()
