"""
Generation Client
Wraps the Gemini generateContent REST API. One outbound call per generate().
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from ...config import GEMINI_API_BASE_URL, GEMINI_API_KEY, GEMINI_MODEL, GENERATION_TIMEOUT_SECONDS
from ...exceptions import GenerationUnavailableError, MalformedResponseError
from ..prompts import RenderedPrompt
from .validation import SymbolMapping, strip_code_fence, validate_symbol_mapping

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    HTML = "html"
    SYMBOL_MAPPING_JSON = "symbol_mapping_json"


@dataclass(frozen=True)
class GeneratedContent:
    format: OutputFormat
    text: str
    symbol_mapping: Optional[SymbolMapping] = None


class GenerationClient:
    """Client for the external generative text service"""

    def __init__(
        self,
        api_key: Optional[str] = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        base_url: str = GEMINI_API_BASE_URL,
        timeout: float = GENERATION_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _build_request_body(self, prompt: RenderedPrompt, expected_format: OutputFormat) -> dict:
        body = {"contents": [{"role": "user", "parts": [{"text": prompt.text}]}]}
        if expected_format == OutputFormat.SYMBOL_MAPPING_JSON:
            body["generationConfig"] = {"responseMimeType": "application/json"}
        return body

    async def _call(self, prompt: RenderedPrompt, expected_format: OutputFormat) -> dict:
        if not self.api_key:
            logger.error("❌ GEMINI_API_KEY not configured")
            raise GenerationUnavailableError("Generation service not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        client = await self._client()

        try:
            logger.info(f"🤖 Generating '{prompt.template_name}' content with {self.model}")
            response = await client.post(
                url,
                params={"key": self.api_key},
                json=self._build_request_body(prompt, expected_format),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(f"❌ Generation request timed out after {self.timeout}s")
            raise GenerationUnavailableError("Generation service timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Generation request failed: {e}")
            raise GenerationUnavailableError(f"Generation service unreachable: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"❌ Generation service returned HTTP {response.status_code}: {response.text[:200]}"
            )
            raise GenerationUnavailableError(
                f"Generation service returned HTTP {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError("Generation service returned a non-JSON body") from e

    @staticmethod
    def _extract_text(payload: dict) -> str:
        """Pull the first candidate's text out of a generateContent reply"""
        try:
            parts = payload["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("Generation reply has no candidates") from e

        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise MalformedResponseError("Generation reply is empty")
        return text

    async def generate(
        self, prompt: RenderedPrompt, expected_format: OutputFormat = OutputFormat.HTML
    ) -> GeneratedContent:
        """
        Send a rendered prompt and return validated content.

        Raises:
            GenerationUnavailableError: Service unreachable, timed out or errored
            MalformedResponseError: Reply empty or failing the schema for the format
        """
        payload = await self._call(prompt, expected_format)
        text = strip_code_fence(self._extract_text(payload))

        if expected_format == OutputFormat.SYMBOL_MAPPING_JSON:
            result = validate_symbol_mapping(text)
            if not result.is_valid:
                logger.error(f"❌ Malformed symbol mapping reply: {result.reason}")
                raise MalformedResponseError(result.reason)
            return GeneratedContent(format=expected_format, text=text, symbol_mapping=result.mapping)

        if not text:
            raise MalformedResponseError("Generation reply is empty")

        logger.info(f"✅ Generated {len(text)} chars for '{prompt.template_name}'")
        return GeneratedContent(format=expected_format, text=text)
