"""LLM factory with fallback provider chain.

Primary: OpenRouter
Fallback 1: Groq (cloud, fast inference)
Fallback 2: Ollama (local)

Models, temperatures, output caps and fallback providers are configured
per oracle role in oversight.toml.

Each provider is piped with a response-length validator so that empty or
suspiciously short replies trigger a cascade to the next provider via
with_fallbacks(). When every provider fails, the last error propagates.
"""

from __future__ import annotations

import structlog
from langchain_core.runnables import Runnable, RunnableLambda
from langchain_openai import ChatOpenAI

from metacog.config import (
    OversightSettings,
    Settings,
    get_oversight_settings,
    get_settings,
)

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Response length validator
# ---------------------------------------------------------------------------


def _make_length_validator(min_chars: int) -> RunnableLambda:
    """Create a Runnable that raises if the LLM response is too short.

    When piped after an LLM (``llm | validator``), a short response raises
    a ``ValueError`` which ``with_fallbacks()`` catches to try the next
    provider in the chain.
    """

    def _validate(response):  # noqa: ANN001
        content = response.content if response.content else ""
        stripped = content.strip() if isinstance(content, str) else str(content)
        if len(stripped) < min_chars:
            raise ValueError(
                f"Response too short ({len(stripped)} chars, minimum {min_chars}). "
                "Falling back to next provider."
            )
        return response

    return RunnableLambda(_validate)


# ---------------------------------------------------------------------------
# LLM factory
# ---------------------------------------------------------------------------


def create_llm(
    role: str,
    temperature: float | None = None,
    max_tokens: int | None = None,
    settings: Settings | None = None,
    oversight_settings: OversightSettings | None = None,
) -> Runnable:
    """Create an LLM with optional fallback provider chain.

    Args:
        role: Oracle role used to look up config in oversight.toml
            (``factual_accuracy``, ``suggestions``, ``regeneration``, ...).
        temperature: Sampling temperature. None = read from oversight.toml.
        max_tokens: Maximum tokens in response. None = read from oversight.toml.
        settings: Optional Settings instance; loads from env if not provided.
        oversight_settings: Optional OversightSettings; loads oversight.toml
            if not provided.

    Returns:
        A Runnable: either a piped chain or a chain with fallbacks.
    """
    if settings is None:
        settings = get_settings()
    if oversight_settings is None:
        oversight_settings = get_oversight_settings()

    model = oversight_settings.get_model(role)
    timeout = oversight_settings.defaults.timeout
    min_chars = oversight_settings.defaults.min_response_length

    # Resolve explicit param > oversight.toml
    if temperature is None:
        temperature = oversight_settings.get_temperature(role)
    if max_tokens is None:
        max_tokens = oversight_settings.get_max_tokens(role)

    kwargs = dict(
        model=model,
        temperature=temperature,
        openai_api_key=settings.openrouter_api_key,
        openai_api_base=settings.openrouter_base_url,
        timeout=timeout,
    )
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens

    primary = ChatOpenAI(**kwargs)

    validator = _make_length_validator(min_chars)
    primary_chain: Runnable = primary | validator

    fallbacks: list[Runnable] = []

    # Fallback 1: Groq
    if oversight_settings.providers.groq.enabled and settings.groq_api_key:
        from langchain_groq import ChatGroq

        groq_model = oversight_settings.get_groq_model(role)
        groq_kwargs = dict(
            model=groq_model,
            temperature=temperature,
            api_key=settings.groq_api_key,
            timeout=timeout,
        )
        if max_tokens is not None:
            groq_kwargs["max_tokens"] = max_tokens
        fallbacks.append(ChatGroq(**groq_kwargs) | validator)
        logger.debug("groq_fallback_configured", role=role, model=groq_model)

    # Fallback 2: Ollama (local, no API key needed)
    if oversight_settings.providers.ollama.enabled:
        from langchain_ollama import ChatOllama

        ollama_model = oversight_settings.get_ollama_model(role)
        base_url = (
            oversight_settings.providers.ollama.base_url or "http://localhost:11434"
        )
        ollama_kwargs = dict(
            model=ollama_model,
            temperature=temperature,
            base_url=base_url,
        )
        if max_tokens is not None:
            ollama_kwargs["num_predict"] = max_tokens
        fallbacks.append(ChatOllama(**ollama_kwargs) | validator)
        logger.debug("ollama_fallback_configured", role=role, model=ollama_model)

    if fallbacks:
        return primary_chain.with_fallbacks(fallbacks)
    return primary_chain
