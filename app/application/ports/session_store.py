from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from app.domain.entities.session import Session


class SessionStorePort(ABC):
    """
    One Session per user id.

    Concurrency contract: callers must hold `lock(user_id)` across the whole
    get -> decide -> set sequence for that user. Different users never
    contend with each other.
    """

    @abstractmethod
    def get(self, user_id: str) -> Session:
        """Return the user's session, or a fresh idle Session."""
        raise NotImplementedError

    @abstractmethod
    def set(self, user_id: str, session: Session) -> None:
        raise NotImplementedError

    @abstractmethod
    def lock(self, user_id: str) -> AbstractContextManager[None]:
        """Per-user mutual exclusion section."""
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, message_id: str) -> bool:
        """
        Record a delivered message id.
        Returns False if the id was already seen (duplicate delivery).
        """
        raise NotImplementedError
