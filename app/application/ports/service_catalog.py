from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def list_services(self) -> list[ServiceCatalogEntry]:
        """All bookable services, in menu order."""
        raise NotImplementedError

    @abstractmethod
    def get_by_selection_id(self, selection_id: str) -> ServiceCatalogEntry | None:
        raise NotImplementedError
