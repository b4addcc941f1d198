from __future__ import annotations

import random

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.actions import (
    Action,
    MenuOption,
    SelectionMenu,
    SendImage,
    SendSelectionMenu,
    SendText,
)
from app.domain.entities.booking import BookingRecord
from app.domain.entities.booking_state import BookingStage
from app.domain.entities.clinic_content import ClinicContent
from app.domain.entities.turn import Language

AR = Language.AR
EN = Language.EN

TEXTS: dict[str, dict[Language, str]] = {
    "booking_start": {
        AR: "📅 لنبدأ الحجز، اختر الوقت المناسب لك 👇",
        EN: "📅 Let's start booking, choose a time below 👇",
    },
    "slot_menu_body": {
        AR: "📅 اختر الموعد المناسب لك:",
        EN: "📅 Choose the time that suits you:",
    },
    "slot_menu_button": {AR: "المواعيد", EN: "Times"},
    "closed_day": {
        AR: "📅 يوم الجمعة عطلة رسمية والعيادة مغلقة، اختر يومًا آخر للحجز بإذن الله 🌷",
        EN: "📅 Friday is a holiday and the clinic is closed, please choose another day.",
    },
    "ask_name": {
        AR: "👍 تم اختيار الموعد! الآن من فضلك ارسل اسمك:",
        EN: "👍 Time selected! Now please send your name:",
    },
    "reprompt_name": {
        AR: "نكمّل الحجز؟ أرسل اسمك 😊",
        EN: "Shall we continue your booking? Please send your name 😊",
    },
    "name_invalid": {
        AR: "⚠️ الرجاء إدخال اسم حقيقي مثل: أحمد، محمد علي، سارة...",
        EN: "⚠️ Please send a real name like: John, Mary...",
    },
    "ask_phone": {
        AR: "📱 ممتاز! الآن أرسل رقم جوالك:",
        EN: "📱 Great! Now send your phone number:",
    },
    "reprompt_phone": {
        AR: "نكمّل الحجز؟ أرسل رقم جوالك 📱",
        EN: "Shall we continue your booking? Please send your phone number 📱",
    },
    "phone_invalid": {
        AR: "⚠️ الرجاء إدخال رقم أردني صحيح مثل: 0785050875",
        EN: "⚠️ Please send a valid Jordanian phone like: 0785050875",
    },
    "service_menu_header": {AR: "💊 اختر الخدمة المطلوبة", EN: "💊 Choose a service"},
    "service_menu_body": {
        AR: "يرجى اختيار نوع الخدمة من القائمة:",
        EN: "Please pick the service from the list:",
    },
    "service_menu_button": {AR: "عرض الخدمات", EN: "Services"},
    "choose_service": {
        AR: "💊 يرجى اختيار الخدمة من القائمة المنسدلة أعلاه:",
        EN: "💊 Please choose a service from the list above:",
    },
    "service_invalid": {
        AR: "⚠️ لم نجد هذه الخدمة، اختر من القائمة من فضلك 👇",
        EN: "⚠️ We couldn't find that service, please pick one from the list 👇",
    },
    "finish_steps_first": {
        AR: "⚠️ يرجى إكمال خطوات الحجز أولاً (الموعد، الاسم، رقم الجوال)",
        EN: "⚠️ Please complete the booking steps first (time, name, phone number)",
    },
    "booking_confirmed": {
        AR: "✅ تم حفظ حجزك بنجاح:\n👤 {name}\n📱 {phone}\n💊 {service}\n📅 {slot}",
        EN: "✅ Booking saved:\n👤 {name}\n📱 {phone}\n💊 {service}\n📅 {slot}",
    },
    "cancel_ask_phone": {
        AR: "📱 أرسل رقم الجوال المرتبط بالحجز لإلغائه:",
        EN: "📱 Send the phone number used for the booking to cancel it:",
    },
    "cancel_confirmed": {
        AR: "✅ تم إلغاء الحجز بنجاح. إذا احتجت أي مساعدة أخرى أنا معك 💚",
        EN: "✅ Your booking has been cancelled. I'm here if you need anything else 💚",
    },
    "cancel_not_found": {
        AR: "❌ لم يتم العثور على حجز مرتبط بهذا الرقم.",
        EN: "❌ No booking was found for this number.",
    },
    "location_text": {
        AR: "📍 هذا هو موقع {clinic}. يمكنك الضغط على الرابط لفتحه في خرائط جوجل 🗺️",
        EN: "📍 This is our location at {clinic}. Tap the link to open it in Google Maps 🗺️",
    },
    "offers_intro": {AR: "💊 هذه عروضنا وخدماتنا الحالية:", EN: "💊 Here are our offers and services:"},
    "offers_outro": {
        AR: "✨ لمزيد من التفاصيل أو لحجز موعد، أخبرني فقط!",
        EN: "✨ For more details or to book an appointment, just let me know!",
    },
    "doctors_intro": {AR: "👨‍⚕️ تعرف على فريقنا الطبي المتخصص:", EN: "👨‍⚕️ Meet our professional medical team:"},
    "doctors_outro": {
        AR: "✨ أطباؤنا ذوو الخبرة هنا لتقديم أفضل رعاية لك! لحجز موعد، فقط أخبرنا 😊",
        EN: "✨ Our experienced doctors are here to provide you with the best care! To book, just let us know 😊",
    },
    "abuse_redirect": {
        AR: (
            "أعتذر إذا كنت تشعر بالإحباط 😊\n\n"
            "أنا هنا لمساعدتك بمعلومات حول {clinic}:\n"
            "📍 موقعنا\n💊 الخدمات والعروض\n👨‍⚕️ فريقنا الطبي\n📅 حجز المواعيد"
        ),
        EN: (
            "I'm sorry if you're feeling frustrated 😊\n\n"
            "I'm here to help you with {clinic}:\n"
            "📍 Our location\n💊 Services and offers\n👨‍⚕️ Our medical team\n📅 Booking appointments"
        ),
    },
    "transcription_retry": {
        AR: "⚠️ لم أتمكن من فهم الرسالة الصوتية، حاول مرة أخرى 🎙️",
        EN: "⚠️ I couldn't understand the voice message, please try again.",
    },
    "assistant_unavailable": {
        AR: "⚠️ حدث خطأ في نظام المساعد الذكي.",
        EN: "⚠️ The assistant is unavailable right now.",
    },
    "persistence_retry": {
        AR: "⚠️ حدث خطأ مؤقت، حاول مرة أخرى بعد قليل.",
        EN: "⚠️ Something went wrong on our side, please try again in a moment.",
    },
}

GREETINGS: dict[Language, tuple[str, ...]] = {
    AR: (
        "👋 أهلاً وسهلاً في *{clinic}*! كيف يمكنني مساعدتك اليوم؟",
        "مرحباً بك في عيادتنا 💚 هل ترغب بحجز موعد أو الاستفسار عن خدمة؟",
        "✨ أهلاً وسهلاً! هل ترغب بالتعرف على عروضنا أو حجز موعد؟",
        "🌷 يا مرحبا! كيف نقدر نساعدك اليوم في *{clinic}*؟",
    ),
    EN: (
        "👋 Hello! Welcome to *{clinic}*! How can I assist you today?",
        "Hi there! 😊 How can I help you book an appointment or learn more about our services?",
        "✨ Hello and welcome to *{clinic}*! Are you interested in our offers or booking a visit?",
        "👋 Hello there! Would you like to see our latest offers or book an appointment?",
    ),
}


def text(key: str, language: Language, **values: str) -> str:
    template = TEXTS[key].get(language) or TEXTS[key][AR]
    return template.format(**values) if values else template


class ReplyComposer:
    def __init__(self, content: ClinicContent, catalog: ServiceCatalogPort) -> None:
        self._content = content
        self._catalog = catalog

    def text(self, key: str, language: Language, **values: str) -> str:
        return text(key, language, clinic=self._content.name, **values)

    def slot_menu(self, language: Language) -> SelectionMenu:
        return SelectionMenu(
            body=text("slot_menu_body", language),
            options=tuple(self._content.slot_options),
            button_label=text("slot_menu_button", language),
        )

    def service_menu(self, language: Language) -> SelectionMenu:
        options = tuple(
            MenuOption(
                id=entry.service_id,
                title=entry.title,
                description=entry.description,
                section=entry.section,
            )
            for entry in self._catalog.list_services()
        )
        return SelectionMenu(
            body=text("service_menu_body", language),
            options=options,
            button_label=text("service_menu_button", language),
            header=text("service_menu_header", language),
        )

    def slot_prompt(self, language: Language) -> list[Action]:
        return [SendText(text("booking_start", language)), SendSelectionMenu(self.slot_menu(language))]

    def service_prompt(self, language: Language) -> list[Action]:
        return [SendSelectionMenu(self.service_menu(language)), SendText(text("choose_service", language))]

    def closed_day(self, language: Language) -> list[Action]:
        return [SendText(text("closed_day", language)), *self.slot_prompt(language)]

    def reprompt(self, stage: BookingStage, language: Language) -> list[Action]:
        """Ask again for whichever booking field is still missing."""
        if stage == BookingStage.AWAIT_SLOT:
            return self.slot_prompt(language)
        if stage == BookingStage.AWAIT_NAME:
            return [SendText(text("reprompt_name", language))]
        if stage == BookingStage.AWAIT_PHONE:
            return [SendText(text("reprompt_phone", language))]
        return self.service_prompt(language)

    def booking_confirmed(self, booking: BookingRecord, language: Language) -> str:
        return text(
            "booking_confirmed",
            language,
            name=booking.name,
            phone=booking.phone,
            service=booking.service,
            slot=booking.appointment_slot,
        )

    def location(self, language: Language) -> list[Action]:
        return [
            SendText(self._content.location_link),
            SendText(self.text("location_text", language)),
        ]

    def offers(self, language: Language) -> list[Action]:
        return [
            SendText(text("offers_intro", language)),
            *(SendImage(url) for url in self._content.offer_images),
            SendText(text("offers_outro", language)),
        ]

    def doctors(self, language: Language) -> list[Action]:
        return [
            SendText(text("doctors_intro", language)),
            *(SendImage(url) for url in self._content.doctor_images),
            SendText(text("doctors_outro", language)),
        ]

    def greeting(self, language: Language) -> str:
        return random.choice(GREETINGS[language]).format(clinic=self._content.name)
