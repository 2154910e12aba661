from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific extraction AI clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        images: list[str] | None = None,
    ) -> str:
        """Return the provider's JSON answer as plain text.

        ``images`` are base64 PNG pages; when present the call is a vision call.
        """
