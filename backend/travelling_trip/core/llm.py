# backend/travelling_trip/core/llm.py

from typing import Optional

from openai import OpenAI, OpenAIError

from travelling_trip.core.errors import LLMTransportError
from travelling_trip.core.logger import logger


DEFAULT_MAX_OUTPUT_TOKENS = 4000


class GeminiClient:
    """
    Text completion against Gemini's OpenAI-compatible endpoint.

    Returns the raw completion text; decoding is the caller's business.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/",
        temperature: float = 0.7,
    ):
        self.model = model
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key, base_url=base_url)

    def generate(self, prompt: str, max_output_tokens: Optional[int] = None) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
            )
        except OpenAIError as e:
            logger.error(f"Gemini request failed: {e}")
            raise LLMTransportError(f"LLM request failed: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            logger.warning("Gemini returned an empty completion")
            return ""
        return content.strip()
