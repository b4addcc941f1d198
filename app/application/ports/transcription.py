from abc import ABC, abstractmethod


class TranscriptionPort(ABC):
    @abstractmethod
    def transcribe(self, media_id: str) -> str:
        """
        Turn a voice note into text.

        Raises TranscriptionUnavailable when the media cannot be fetched, the
        provider fails, or the transcript is empty.
        """
        raise NotImplementedError
