"""Reasoning-oracle boundary.

The core only ever talks to an ``Oracle``: one async ``complete`` call that
takes a system prompt, a user prompt, a temperature and an output cap and
returns the judge's text. ``LangChainOracle`` is the production adapter on
top of the provider chain built by ``metacog.models.create_llm``.

Failures are never turned into text. A timeout raises ``OracleTimeoutError``
and every other provider failure raises ``OracleError``; cancellation of the
awaiting task propagates untouched.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

import structlog
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.runnables import Runnable

from metacog.config import OversightSettings, Settings, get_oversight_settings
from metacog.errors import OracleError, OracleTimeoutError
from metacog.models import create_llm

logger = structlog.get_logger(__name__)


@runtime_checkable
class Oracle(Protocol):
    """Hosted-model completion capability consumed by the core.

    ``role`` names the caller (a dimension, ``suggestions`` or
    ``regeneration``) so adapters can route to a role-specific model.
    """

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
        role: str | None = None,
    ) -> str: ...


class LangChainOracle:
    """Oracle backed by a langchain Runnable per call.

    Holds no mutable state between calls, so one instance can serve every
    in-flight dimension judge concurrently.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        oversight_settings: OversightSettings | None = None,
        timeout: float | None = None,
        default_role: str = "factual_accuracy",
    ) -> None:
        self._settings = settings
        self._oversight_settings = oversight_settings or get_oversight_settings()
        self._timeout = (
            timeout if timeout is not None else self._oversight_settings.defaults.timeout
        )
        self._default_role = default_role

    def _build_llm(self, role: str, temperature: float, max_output_tokens: int) -> Runnable:
        return create_llm(
            role,
            temperature=temperature,
            max_tokens=max_output_tokens,
            settings=self._settings,
            oversight_settings=self._oversight_settings,
        )

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
        role: str | None = None,
    ) -> str:
        role = role or self._default_role
        llm = self._build_llm(role, temperature, max_output_tokens)
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]

        try:
            response = await asyncio.wait_for(llm.ainvoke(messages), timeout=self._timeout)
        except TimeoutError as exc:
            logger.warning("oracle_timeout", role=role, timeout=self._timeout)
            raise OracleTimeoutError(
                f"Oracle call for role '{role}' timed out after {self._timeout}s"
            ) from exc
        except Exception as exc:
            logger.warning("oracle_call_failed", role=role, error=str(exc))
            raise OracleError(f"Oracle call for role '{role}' failed: {exc}") from exc

        content = getattr(response, "content", None)
        if not isinstance(content, str):
            raise OracleError(
                f"Oracle returned a malformed payload for role '{role}': "
                f"{type(content).__name__}"
            )
        return content
