"""
Gemini API client for match narration.

Async httpx wrapper with retry and exponential backoff on rate limits,
server errors and transport failures. Client errors are not retried.

Requires GEMINI_API_KEY environment variable (or an explicit key).
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Text plus usage metadata from one generation call."""
    text: str
    model: str
    total_tokens: int
    latency_ms: float


class NarrationError(Exception):
    """Base exception for narration failures."""
    pass


class NarrationRateLimitError(NarrationError):
    """Raised when the API keeps rate limiting after all retries."""
    pass


class NarrationAPIError(NarrationError):
    """Raised for API errors."""
    def __init__(self, message: str, status_code: int, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GeminiClient:
    """
    Async client for the Gemini generateContent endpoint.

    Usage:
        async with GeminiClient() as client:
            result = await client.generate(system="...", user="...")
            print(result.text)
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: API key. Defaults to GEMINI_API_KEY env var.
            model: Model name. Defaults to DEFAULT_MODEL.
            max_retries: Attempts for transient errors.
            retry_delay: Base delay between retries (doubles each attempt).
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY environment variable not set")

        self.model = model or self.DEFAULT_MODEL
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._request_count = 0

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _build_url(self) -> str:
        return f"{self.BASE_URL}/models/{self.model}:generateContent?key={self.api_key}"

    @staticmethod
    def _build_request_body(system: str, user: str, temperature: float, max_tokens: int) -> dict:
        return {
            "system_instruction": {"parts": [{"text": system}]},
            "contents": [{"role": "user", "parts": [{"text": user}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                "topP": 0.95,
            },
        }

    async def generate(
        self,
        system: str,
        user: str,
        temperature: float = 0.9,
        max_tokens: int = 300,
    ) -> GenerationResult:
        """
        Generate text.

        Raises:
            NarrationRateLimitError: If rate limited after retries.
            NarrationAPIError: For non-retryable API errors.
            NarrationError: For transport failures after retries.
        """
        client = await self._get_client()
        body = self._build_request_body(system, user, temperature, max_tokens)
        last_error: Optional[NarrationError] = None

        for attempt in range(self.max_retries):
            delay = self.retry_delay * (2 ** attempt)
            try:
                start = time.perf_counter()
                response = await client.post(self._build_url(), json=body)
                latency_ms = (time.perf_counter() - start) * 1000
            except httpx.TimeoutException:
                logger.warning(f"Narration request timed out, retrying in {delay:.1f}s (attempt {attempt + 1})")
                last_error = NarrationError("Request timed out")
                await asyncio.sleep(delay)
                continue
            except httpx.RequestError as e:
                logger.warning(f"Narration request error: {e}, retrying in {delay:.1f}s")
                last_error = NarrationError(f"Request error: {e}")
                await asyncio.sleep(delay)
                continue

            if response.status_code == 200:
                return self._parse_response(response.json(), latency_ms)
            if response.status_code == 429:
                logger.warning(f"Rate limited, retrying in {delay:.1f}s (attempt {attempt + 1})")
                last_error = NarrationRateLimitError("Rate limited by Gemini API")
            elif response.status_code >= 500:
                logger.warning(f"Server error {response.status_code}, retrying in {delay:.1f}s")
                last_error = NarrationAPIError(
                    f"Server error: {response.status_code}", response.status_code, response.text
                )
            else:
                raise NarrationAPIError(
                    f"API error: {response.status_code}", response.status_code, response.text
                )
            await asyncio.sleep(delay)

        raise last_error or NarrationError("Failed after all retries")

    def _parse_response(self, data: dict, latency_ms: float) -> GenerationResult:
        candidates = data.get("candidates", [])
        if not candidates:
            raise NarrationAPIError("No candidates in response", 200, str(data))
        parts = candidates[0].get("content", {}).get("parts", [])
        if not parts:
            raise NarrationAPIError("No parts in response", 200, str(data))

        self._request_count += 1
        usage = data.get("usageMetadata", {})
        return GenerationResult(
            text=parts[0].get("text", ""),
            model=self.model,
            total_tokens=usage.get("totalTokenCount", 0),
            latency_ms=latency_ms,
        )

    @property
    def request_count(self) -> int:
        return self._request_count
