"""Text-generation client (Anthropic Messages API over HTTP).

The dashboard only needs "prompt in, text out", so this is a thin wrapper
around a pooled :class:`requests.Session`.  The blocking request runs in
the default executor; the caller bounds it with its own timeout.
"""

from __future__ import annotations

import asyncio

import requests
from loguru import logger
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-sonnet-4-5"


class AnthropicTextGenerator:
    """Callable ``await generator(prompt, api_key) -> str | None``."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 400,
        request_timeout: float = 30.0,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._request_timeout = request_timeout

        self.session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=1,
            pool_maxsize=2,
            max_retries=Retry(
                total=3,
                backoff_factor=0.5,
                status_forcelist=(429, 500, 502, 503, 529),
                allowed_methods=frozenset({"POST"}),
            ),
        )
        self.session.mount("https://", adapter)
        self.session.headers.update({
            "anthropic-version": API_VERSION,
            "content-type": "application/json",
            "User-Agent": "RetroDeck/0.1",
        })

    def _post(self, prompt: str, api_key: str) -> str | None:
        payload = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            resp = self.session.post(
                API_URL,
                json=payload,
                headers={"x-api-key": api_key},
                timeout=self._request_timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Generation request failed: {}", e)
            return None

        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text") or ""
        return None

    async def __call__(self, prompt: str, api_key: str) -> str | None:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._post, prompt, api_key)

    def close(self) -> None:
        self.session.close()
