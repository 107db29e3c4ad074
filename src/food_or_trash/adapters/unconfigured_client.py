"""Placeholder classifier used when no AI credentials are configured."""

from dataclasses import dataclass

from food_or_trash.services.classifier import ClassifierClient, ClassifierError


@dataclass
class UnconfiguredClassifierClient(ClassifierClient):
    """Classifier client whose every call fails, forcing fail-safe verdicts."""

    provider: str

    async def complete(
        self, *, system_prompt: str, user_prompt: str, max_tokens: int
    ) -> str:
        raise ClassifierError(f"{self.provider} classifier is not configured")

    async def describe_image(
        self, *, image_data_url: str, prompt: str, max_tokens: int
    ) -> str:
        raise ClassifierError(f"{self.provider} classifier is not configured")

    async def close(self) -> None:
        return None
