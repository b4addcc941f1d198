from __future__ import annotations

from app.core.config import settings
from app.domain.entities.actions import MenuOption
from app.domain.entities.clinic_content import ClinicContent

OFFER_IMAGES = (
    "https://drive.google.com/uc?export=view&id=104QzzCy2U5ujhADK_SD0dGldowwlgVU2",
    "https://drive.google.com/uc?export=view&id=19EsrCSixVa_8trbzFF5lrZJqcue0quDW",
    "https://drive.google.com/uc?export=view&id=17jaUTvf_S2nqApqMlRc3r8q97uPulvDx",
)

DOCTOR_IMAGES = (
    "https://drive.google.com/uc?export=view&id=1aHoA2ks39qeuMk9WMZOdotOod-agEonm",
    "https://drive.google.com/uc?export=view&id=1Oe2UG2Gas6UY0ORxXtUYvTJeJZ8Br2_R",
    "https://drive.google.com/uc?export=view&id=1_4eDWRuVme3YaLLoeFP_10LYHZyHyjUT",
)

SLOT_OPTIONS = (
    MenuOption(id="slot_3pm", title="3 PM"),
    MenuOption(id="slot_6pm", title="6 PM"),
    MenuOption(id="slot_9pm", title="9 PM"),
)

SLOT_SHORTCUTS = {"3": "3 PM", "6": "6 PM", "9": "9 PM"}


def build_clinic_content() -> ClinicContent:
    return ClinicContent(
        name=settings.CLINIC_NAME,
        location_link=settings.CLINIC_LOCATION_LINK,
        offer_images=OFFER_IMAGES,
        doctor_images=DOCTOR_IMAGES,
        slot_options=SLOT_OPTIONS,
        slot_shortcuts=dict(SLOT_SHORTCUTS),
    )
