"""Cloudflare Workers AI client for text and vision classification."""

from dataclasses import dataclass

import httpx

from food_or_trash.services.classifier import ClassifierClient, ClassifierError


@dataclass
class HttpxWorkersAIClient(ClassifierClient):
    """HTTPX-backed Workers AI client."""

    account_id: str
    api_key: str
    base_url: str
    text_model: str
    vision_model: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        account_id: str,
        api_key: str,
        base_url: str,
        text_model: str,
        vision_model: str,
    ) -> "HttpxWorkersAIClient":
        """Create a Workers AI client with a managed httpx session."""
        return cls(
            account_id=account_id,
            api_key=api_key,
            base_url=base_url,
            text_model=text_model,
            vision_model=vision_model,
            http_client=httpx.AsyncClient(),
        )

    async def complete(
        self, *, system_prompt: str, user_prompt: str, max_tokens: int
    ) -> str:
        """Run the text model on a system and user prompt."""
        return await self._run(
            self.text_model,
            {
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "max_tokens": max_tokens,
            },
        )

    async def describe_image(
        self, *, image_data_url: str, prompt: str, max_tokens: int
    ) -> str:
        """Run the vision model on an image data URL."""
        return await self._run(
            self.vision_model,
            {
                "messages": [
                    {
                        "role": "user",
                        "content": [
                            {"type": "image_url", "image_url": {"url": image_data_url}},
                            {"type": "text", "text": prompt},
                        ],
                    }
                ],
                "max_tokens": max_tokens,
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _run(self, model: str, payload: dict[str, object]) -> str:
        """Call a Workers AI model and return its text response."""
        url = f"{self.base_url}/accounts/{self.account_id}/ai/run/{model}"
        try:
            response = await self.http_client.post(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise ClassifierError(f"Workers AI request failed: {exc}") from exc
        except ValueError as exc:
            raise ClassifierError("Workers AI returned invalid JSON") from exc
        result = data.get("result") if isinstance(data, dict) else None
        text = result.get("response") if isinstance(result, dict) else None
        return text if isinstance(text, str) else ""
