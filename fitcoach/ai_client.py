import asyncio
import time
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from .config import AI_TIMEOUT_SECONDS, GENERATION_MODEL, OPENAI_API_KEY
from .exceptions import AIProviderError, GenerationTimeoutError
from .logging import get_logger

logger = get_logger(__name__)


class TextGenerator:
    """Single-prompt text generation over the OpenAI Responses API."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: str = GENERATION_MODEL,
        timeout: float = AI_TIMEOUT_SECONDS,
    ):
        self.client = client or AsyncOpenAI(api_key=OPENAI_API_KEY)
        self.model = model
        self.timeout = timeout

    async def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
    ) -> str:
        model = model or self.model
        timeout = timeout or self.timeout
        params = {"model": model, "input": prompt}
        if temperature is not None:
            params["temperature"] = temperature

        start = time.monotonic()
        logger.info("llm.call.start model=%s prompt_chars=%s", model, len(prompt))
        try:
            resp = await asyncio.wait_for(
                self.client.responses.create(**params), timeout=timeout
            )
        except asyncio.TimeoutError as e:
            logger.warning("llm.call.timeout model=%s timeout_s=%s", model, timeout)
            raise GenerationTimeoutError(f"AI generation exceeded {timeout:g}s") from e
        except OpenAIError as e:
            logger.error("llm.call.failed model=%s error=%s", model, e)
            raise AIProviderError(f"AI provider error: {e}") from e

        text = resp.output_text
        if not text or not text.strip():
            raise AIProviderError("AI provider returned an empty response")

        latency_ms = int((time.monotonic() - start) * 1000)
        logger.info("llm.call.end model=%s latency_ms=%s chars=%s", model, latency_ms, len(text))
        return text
