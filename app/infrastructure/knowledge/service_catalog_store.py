from __future__ import annotations

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service_catalog import ServiceCatalogEntry
from app.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: tuple[ServiceCatalogEntry, ...] | None = None) -> None:
        self._catalog = tuple(catalog or SERVICE_CATALOG)
        self._by_id = {entry.service_id: entry for entry in self._catalog}

    def list_services(self) -> list[ServiceCatalogEntry]:
        return list(self._catalog)

    def get_by_selection_id(self, selection_id: str) -> ServiceCatalogEntry | None:
        return self._by_id.get(selection_id.strip())
