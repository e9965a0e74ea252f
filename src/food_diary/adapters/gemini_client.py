"""Google Gemini generateContent client."""

from dataclasses import dataclass

import httpx

from food_diary.services.estimator import EstimatorClient


@dataclass
class HttpxGeminiClient(EstimatorClient):
    """HTTPX-backed Gemini client returning JSON text."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout: float = 30.0
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def generate_json(
        self, *, model: str, system_instruction: str, prompt: str
    ) -> str:
        """Call generateContent in JSON mode and unwrap the first candidate."""
        url = f"{self.base_url}/models/{model}:generateContent"
        payload: dict[str, object] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "generationConfig": {"responseMimeType": "application/json"},
        }
        response = await self.http_client.post(
            url,
            headers={"x-goog-api-key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return _unwrap_text(response.json())

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _unwrap_text(body: object) -> str:
    """Return candidates[0].content.parts[0].text from a response body."""
    if not isinstance(body, dict):
        raise ValueError("Gemini response is not a JSON object")
    candidates = body.get("candidates") or []
    if not candidates:
        raise ValueError("Gemini returned no candidates")
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    if not parts:
        raise ValueError("Gemini candidate has no content parts")
    text = parts[0].get("text")
    if not isinstance(text, str) or not text:
        raise ValueError("Gemini returned an empty response")
    return text
