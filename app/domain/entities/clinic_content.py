from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.actions import MenuOption


@dataclass(frozen=True)
class ClinicContent:
    """Static, read-only clinic content used by replies and the slot menu."""

    name: str
    location_link: str
    offer_images: tuple[str, ...] = ()
    doctor_images: tuple[str, ...] = ()
    slot_options: tuple[MenuOption, ...] = ()
    slot_shortcuts: dict[str, str] = field(default_factory=dict)  # "3" -> "3 PM"

    def slot_label(self, selection_id: str) -> str | None:
        for option in self.slot_options:
            if option.id == selection_id:
                return option.title
        return None
