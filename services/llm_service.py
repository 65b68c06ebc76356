import asyncio
import math
import requests
import logging
from typing import Any, Dict, List, Optional

from core.domain import SimplificationResult
from core.exceptions import UpstreamError, upstream_error_from_message
from core.interfaces import ISimplifier
from core.languages import language_name
from services.prompts import DEFAULT_PROMPT_OPTIONS, PromptOptions, build_messages
from services.response_parser import parse_simplification
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

CHARS_PER_TOKEN = 4


def output_token_budget(
    text_length: int,
    min_tokens: int = settings.LLM_MIN_OUTPUT_TOKENS,
    max_tokens: int = settings.LLM_MAX_OUTPUT_TOKENS,
) -> int:
    """
    max_tokens for a document of `text_length` characters.

    Simplified output runs about twice as long as the input, so the budget
    grows with the input and is clamped to [min_tokens, max_tokens].
    """
    estimated_input_tokens = math.ceil(text_length / CHARS_PER_TOKEN)
    return min(max(min_tokens, estimated_input_tokens * 2), max_tokens)


class LLMService:
    """A service to interact with a hosted OpenAI-compatible chat-completions API (e.g., Groq)."""

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: Optional[str],
        temperature: float = settings.LLM_TEMPERATURE,
        timeout: int = settings.REQUEST_TIMEOUT,
    ):
        """
        Initializes the LLMService.

        Args:
            base_url: The base URL of the API (without /chat/completions).
            model: The name of the model to use.
            api_key: Bearer token for the provider.
            temperature: Sampling temperature, 0 for deterministic output.
            timeout: The request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.timeout = timeout

    def chat(self, messages: List[Dict[str, str]], max_tokens: int) -> str:
        """
        Sends a chat completion request and returns the message content.

        Raises:
            UpstreamError: On any transport, HTTP or payload failure
        """
        if not self.api_key:
            logger.error("LLM chat called without an API key.")
            raise UpstreamError("LLM_API_KEY is not configured. Please set it in your environment.")

        try:
            logger.info(f"Sending prompt to LLM model '{self.model}' (max_tokens={max_tokens})...")
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "messages": messages,
                    "temperature": self.temperature,
                    "max_tokens": max_tokens,
                },
                timeout=self.timeout
            )

            response.raise_for_status()  # Raises an HTTPError for bad responses (4xx or 5xx)

            result = response.json()
        except requests.exceptions.Timeout:
            logger.error(f"LLM request timed out after {self.timeout} seconds.")
            raise UpstreamError("LLM request timed out")
        except requests.exceptions.ConnectionError:
            logger.error(f"Cannot connect to LLM at {self.base_url}.")
            raise UpstreamError("Cannot connect to LLM service")
        except requests.exceptions.HTTPError as e:
            logger.error(f"LLM service returned an error: {e.response.status_code} {e.response.text}")
            raise upstream_error_from_message(
                f"Failed to simplify document: {e.response.status_code} {e.response.text}"
            )
        except requests.exceptions.JSONDecodeError as e:
            logger.error(f"LLM response was not valid JSON: {e}")
            raise UpstreamError("Malformed response from LLM service")
        except requests.exceptions.RequestException as e:
            # Also covers MissingSchema/InvalidURL from a bad LLM_BASE_URL
            logger.error(f"An unexpected error occurred in LLMService: {e}", exc_info=True)
            raise upstream_error_from_message(f"Failed to simplify document: {e}")

        content = self._content_of(result)
        if not content:
            logger.error("LLM response was empty or malformed.")
            raise UpstreamError("Empty response from AI model")

        logger.info("Successfully received response from LLM.")
        return content

    @staticmethod
    def _content_of(result: Any) -> str:
        try:
            return (result["choices"][0]["message"]["content"] or "").strip()
        except (KeyError, IndexError, TypeError):
            return ""


class DocumentSimplifier(ISimplifier):
    """Prompt construction, LLM call and response repair for one document."""

    def __init__(
        self,
        llm: LLMService,
        prompt_options: PromptOptions = DEFAULT_PROMPT_OPTIONS,
        strict_parsing: bool = settings.LLM_STRICT_PARSING,
    ):
        self.llm = llm
        self.prompt_options = prompt_options
        self.strict_parsing = strict_parsing

    async def simplify(self, text: str, language: str) -> SimplificationResult:
        if len(text) > settings.LARGE_DOCUMENT_WARNING_CHARS:
            logger.warning(f"Large document detected: {len(text)} characters")

        messages = build_messages(text, language_name(language), self.prompt_options)
        max_tokens = output_token_budget(len(text))

        raw = await asyncio.to_thread(self.llm.chat, messages, max_tokens)
        return parse_simplification(raw, strict=self.strict_parsing)
