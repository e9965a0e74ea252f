"""OpenAI Responses API client for nutrition estimates."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from food_diary.services.estimator import EstimatorClient


@dataclass
class OpenAIEstimatorClient(EstimatorClient):
    """Estimator client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(cls, api_key: str, timeout: float = 30.0) -> "OpenAIEstimatorClient":
        """Create an OpenAI estimator client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0))

    async def generate_json(
        self, *, model: str, system_instruction: str, prompt: str
    ) -> str:
        """Call OpenAI Responses API in JSON mode."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_instruction,
            input=prompt,
            text={"format": {"type": "json_object"}},
            store=self.store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP session."""
        await self.client.close()
