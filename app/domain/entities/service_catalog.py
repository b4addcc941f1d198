from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCatalogEntry:
    service_id: str  # selection id, e.g. "service_فحص_عام"
    title: str
    description: str
    section: str
    aliases: tuple[str, ...] = ()
