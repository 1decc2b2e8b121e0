import logging

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from notes_rag.core.errors import GeneratorUnavailableError
from notes_rag.core.models.answer import Generation

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You answer questions about the user's personal notes. "
    "Stay strictly within the provided context and cite sources by number."
)


class OllamaClient:
    """Answer generator for Ollama (OpenAI-compatible API)."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "llama3",
        max_tokens: int = 1024,
        temperature: float = 0.1,
        timeout: float = 120.0,
    ):
        """Initialize Ollama client.

        Args:
            base_url: Ollama API URL.
            model: Model name.
            max_tokens: Max response tokens.
            temperature: Sampling temperature.
            timeout: Request timeout in seconds.
        """
        self._client = OpenAI(
            base_url=base_url, api_key="ollama", timeout=timeout, max_retries=1
        )
        self._base_url = base_url
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def model(self) -> str:
        return self._model

    def generate(self, prompt: str) -> Generation:
        """Generate an answer for a rendered prompt.

        Raises:
            GeneratorUnavailableError: Ollama unreachable, timed out or errored.
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except (APIConnectionError, APITimeoutError) as e:
            logger.error(f"Ollama request failed: {e}")
            raise GeneratorUnavailableError(f"{self._model}: {e}") from e
        except APIStatusError as e:
            logger.error(f"Ollama returned {e.status_code}: {e.message}")
            raise GeneratorUnavailableError(
                f"{self._model}: HTTP {e.status_code}"
            ) from e

        content = response.choices[0].message.content if response.choices else None
        return Generation(text=(content or "").strip())

    def check_model(self, timeout: float = 5.0) -> bool:
        """Check that Ollama is up and has the configured model pulled.

        Returns:
            True if model is listed by ``/api/tags``.
        """
        api_root = self._base_url.rstrip("/").removesuffix("/v1")

        try:
            resp = httpx.get(f"{api_root}/api/tags", timeout=timeout)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Ollama not reachable at {api_root}: {e}")
            return False

        models = [m["name"] for m in resp.json().get("models", [])]
        # "llama3" matches "llama3:latest"
        if any(self._model in (m, m.split(":")[0]) for m in models):
            logger.info(f"Model {self._model} is ready")
            return True

        logger.warning(
            f"Model {self._model} not found. Run: ollama pull {self._model}"
        )
        return False
