"""Chat-completions client for OpenAI-compatible endpoints (Groq by default)."""

import json
import os
import re
from typing import Any, Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.config.loader import get_setting
from ..observability.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.1-8b-instant"


def is_test_mode() -> bool:
    return bool(os.getenv("HRDASH_TEST_MODE"))


class LLMClient:
    """Wrapper around the OpenAI SDK with retry logic and JSON outputs."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        timeout: int = 60,
        max_retries: int = 3,
    ):
        """Initialize the client.

        Args:
            api_key: API key (defaults to GROQ_API_KEY, then OPENAI_API_KEY)
            base_url: OpenAI-compatible API root
            model: Default model to use
            max_tokens: Completion token cap
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            max_retries: Maximum number of SDK-level retries
        """
        self.test_mode = is_test_mode()
        self.api_key = api_key or os.getenv("GROQ_API_KEY") or os.getenv("OPENAI_API_KEY")
        if not self.api_key and not self.test_mode:
            raise ValueError("LLM API key must be provided or set in GROQ_API_KEY env var")

        self.base_url = base_url
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

        self.client: AsyncOpenAI | None = None
        if not self.test_mode:
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
            )

        logger.info("llm_client_initialized", model=model, base_url=base_url, test_mode=self.test_mode)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(OpenAIError),
        reraise=True,
    )
    async def create_json(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: Type[T],
        model: str | None = None,
    ) -> tuple[T, dict[str, Any]]:
        """Ask for a JSON object and parse it into ``response_model``.

        Args:
            system_prompt: System message
            user_prompt: User message (must mention JSON for json_object mode)
            response_model: Pydantic model for the parsed output
            model: Model to use (defaults to instance default)

        Returns:
            Tuple of (parsed response, usage metadata)

        Raises:
            OpenAIError: If the API call fails after retries
            ValueError: If the completion is empty or not valid JSON
        """
        model = model or self.model

        if self.test_mode:
            return placeholder_instance(response_model), {"tokens_total": 0, "model": model, "mock": True}

        logger.info("creating_completion", model=model, input_length=len(user_prompt))

        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("llm_error", error=str(e), model=model, exc_info=True)
            raise

        output_text = completion.choices[0].message.content if completion.choices else None
        if not output_text:
            raise ValueError("No content returned from LLM completion")

        parsed = parse_model_output(response_model, output_text)

        usage = completion.usage
        usage_metadata = {
            "tokens_total": getattr(usage, "total_tokens", 0),
            "tokens_input": getattr(usage, "prompt_tokens", 0),
            "tokens_output": getattr(usage, "completion_tokens", 0),
            "response_id": getattr(completion, "id", None),
            "model": getattr(completion, "model", model),
        }
        logger.info(
            "completion_created",
            response_id=usage_metadata["response_id"],
            tokens_total=usage_metadata["tokens_total"],
        )
        return parsed, usage_metadata


_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Pull a JSON object out of chatty model output.

    Tries a fenced ```json block first, then the span between the first
    ``{`` and the last ``}``.
    """
    candidates = [m.group(1) for m in _CODE_FENCE.finditer(text)]
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None


def parse_model_output(response_model: Type[T], output_text: str) -> T:
    """Validate completion text as ``response_model``.

    Raises:
        ValueError: If no JSON object can be recovered (pydantic's
            ValidationError is a ValueError too)
    """
    try:
        return response_model.model_validate_json(output_text)
    except ValueError:
        recovered = extract_json_object(output_text)
        if recovered is None:
            logger.warning("llm_output_not_json", preview=output_text[:200])
            raise
        logger.info("llm_output_repaired", model=response_model.__name__)
        return response_model.model_validate(recovered)


def placeholder_instance(model_cls: Type[T]) -> T:
    """Smallest valid instance of ``model_cls``, used in test mode.

    Optional fields keep their defaults; required fields get an empty value
    of their type, recursing into nested models.
    """
    empty_values: dict[Any, Any] = {str: "", int: 0, float: 0.0, bool: False, list: [], dict: {}}
    values: dict[str, Any] = {}
    for name, field in model_cls.model_fields.items():
        if not field.is_required():
            continue
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            values[name] = placeholder_instance(annotation)
        else:
            values[name] = empty_values.get(annotation)
    return model_cls.model_validate(values)


_llm_client: LLMClient | None = None


def get_llm_client(config: dict[str, Any] | None = None) -> LLMClient:
    """Shared client built from the ``llm`` config section on first use."""
    global _llm_client

    if _llm_client is None:
        settings = get_setting(config or {}, "llm", {})
        _llm_client = LLMClient(
            base_url=settings.get("base_url", DEFAULT_BASE_URL),
            model=settings.get("model", DEFAULT_MODEL),
            max_tokens=settings.get("max_tokens", 2000),
            temperature=settings.get("temperature", 0.7),
            timeout=settings.get("timeout", 60),
            max_retries=settings.get("max_retries", 3),
        )
    return _llm_client
