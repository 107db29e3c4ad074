"""OpenAI Responses API client for text and vision classification."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from food_or_trash.services.classifier import ClassifierClient, ClassifierError


@dataclass
class OpenAIClassifierClient(ClassifierClient):
    """Classifier client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    vision_model: str
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, model: str, vision_model: str, store: bool = False
    ) -> "OpenAIClassifierClient":
        """Create an OpenAI classifier client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            vision_model=vision_model,
            store=store,
        )

    async def complete(
        self, *, system_prompt: str, user_prompt: str, max_tokens: int
    ) -> str:
        """Send a system and user prompt and return the output text."""
        return await self._create(
            model=self.model,
            input=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_output_tokens=max_tokens,
        )

    async def describe_image(
        self, *, image_data_url: str, prompt: str, max_tokens: int
    ) -> str:
        """Send an image with a prompt and return the output text."""
        return await self._create(
            model=self.vision_model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            max_output_tokens=max_tokens,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()

    async def _create(self, **request_payload: object) -> str:
        try:
            response = await self.client.responses.create(
                **request_payload, store=self.store
            )
        except OpenAIError as exc:
            raise ClassifierError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ClassifierError("OpenAI returned an empty response")
        return output_text
