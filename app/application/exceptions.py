class CollaboratorUnavailable(RuntimeError):
    """Raised when an external collaborator (assistant, speech-to-text, booking store) fails."""
    pass


class LLMUpstreamError(CollaboratorUnavailable):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class TranscriptionUnavailable(CollaboratorUnavailable):
    """Raised when a voice note cannot be turned into text (download failed, empty transcript)."""
    pass


class PersistenceUnavailable(CollaboratorUnavailable):
    """Raised when the booking store cannot append, look up or cancel a booking."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass


class ValidationRejected(ValueError):
    """Raised when user input fails a validator. Always recoverable by re-prompting."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
