from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.llm import LLMPort
from app.application.ports.message_platform import MessagePlatformPort
from app.application.ports.service_catalog import ServiceCatalogPort
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
from app.domain.entities.clinic_content import ClinicContent
from app.infrastructure.knowledge.clinic_content_data import build_clinic_content
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.llm.openai_llm import OpenAILLM
from app.infrastructure.persistence.memory_booking_store import MemoryBookingStore
from app.infrastructure.persistence.supabase_booking_store import SupabaseBookingStore
from app.infrastructure.store.memory_store import MemorySessionStore
from app.infrastructure.transcription.mock_transcriber import MockTranscriber
from app.infrastructure.transcription.whisper_transcriber import WhisperTranscriber
from app.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform
from app.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from app.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform


_session_store: MemorySessionStore | None = None

logger = logging.getLogger(__name__)


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_llm() -> LLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAILLM()
    return MockLLM()


def get_session_store() -> MemorySessionStore:
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStore(idle_timeout_seconds=settings.SESSION_IDLE_TIMEOUT_SECONDS)
    return _session_store


@lru_cache
def get_clinic_content() -> ClinicContent:
    return build_clinic_content()


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_booking_store() -> BookingStorePort:
    if settings.SUPABASE_URL and settings.SUPABASE_SERVICE_KEY:
        logger.info("Using SupabaseBookingStore")
        return SupabaseBookingStore(
            base_url=settings.SUPABASE_URL,
            service_key=settings.SUPABASE_SERVICE_KEY,
            table=settings.SUPABASE_BOOKINGS_TABLE,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    if _is_dev():
        logger.info("Using MemoryBookingStore (Supabase not configured, ENV=dev/local)")
        return MemoryBookingStore()
    raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required to store bookings.")


@lru_cache
def get_whatsapp_client() -> WhatsAppClient | None:
    if not (settings.WHATSAPP_TOKEN and settings.WHATSAPP_PHONE_NUMBER_ID):
        return None
    return WhatsAppClient(
        access_token=settings.WHATSAPP_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        api_version=settings.WHATSAPP_GRAPH_API_VERSION,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


@lru_cache
def get_whatsapp_platform() -> MessagePlatformPort:
    logger.info("WHATSAPP_TOKEN present=%s ENV=%s", bool(settings.WHATSAPP_TOKEN), settings.ENV)

    client = get_whatsapp_client()
    if client is None:
        if _is_dev():
            logger.info("Using MockWhatsAppPlatform (token missing, ENV=dev/local)")
            return MockWhatsAppPlatform()
        raise ValueError("WHATSAPP_TOKEN and WHATSAPP_PHONE_NUMBER_ID are required to send WhatsApp replies.")

    logger.info("Using real WhatsAppPlatform")
    return WhatsAppPlatform(client=client)


@lru_cache
def get_transcriber() -> TranscriptionPort:
    client = get_whatsapp_client()
    if client is None or not settings.OPENAI_API_KEY:
        logger.info("Using MockTranscriber (WhatsApp media or OpenAI credentials missing)")
        return MockTranscriber()
    return WhisperTranscriber(media_client=client)


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    content = get_clinic_content()
    catalog = get_service_catalog()
    llm = get_llm()
    composer = ReplyComposer(content=content, catalog=catalog)
    cancellation = CancellationUseCase(composer=composer)
    booking = BookingUseCase(
        composer=composer,
        name_validator=NameValidator(llm),
        catalog=catalog,
        content=content,
        cancellation=cancellation,
    )
    router = RouteTurnUseCase(
        classifier=ClassifyIntentUseCase(content),
        booking=booking,
        cancellation=cancellation,
        composer=composer,
    )
    return HandleIncomingMessageUseCase(
        store=get_session_store(),
        normalizer=NormalizeInputUseCase(transcriber=get_transcriber()),
        router=router,
        send_reply=SendReplyUseCase(platform=get_whatsapp_platform()),
        llm=llm,
        bookings=get_booking_store(),
        composer=composer,
        timezone=settings.CLINIC_TIMEZONE,
    )
