from abc import ABC, abstractmethod

from app.domain.entities.actions import SelectionMenu


class MessagePlatformPort(ABC):
    @abstractmethod
    def send_text(self, recipient_id: str, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def send_selection_menu(self, recipient_id: str, menu: SelectionMenu) -> None:
        raise NotImplementedError

    @abstractmethod
    def send_image(self, recipient_id: str, url: str) -> None:
        raise NotImplementedError
