"""Text generation through agno.

A model string names a provider and a model id. The executor builds one
agno Agent per (model, sampling settings) pair, walks the fallback chain
when a provider fails, and stamps each response with the turn context
set by the dialogue engine.

Model strings:
    openai/gpt-4o-mini                    -> agno OpenAIChat
    anthropic/claude-3-haiku              -> agno Claude
    groq/llama-3.1-70b                    -> agno Groq
    openrouter/anthropic/claude-3-haiku   -> agno OpenRouter
    mock/<anything>                       -> canned reply, no network
"""

from __future__ import annotations

import asyncio
import importlib
import time
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from formchat.observability.logging import get_logger
from formchat.providers.llm.base import (
    LLMMessage,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)

if TYPE_CHECKING:
    from agno.agent import Agent

    from formchat.config.models.dialogue import ReasoningConfig

logger = get_logger(__name__)

# provider prefix -> (agno module, model class)
AGNO_MODELS: dict[str, tuple[str, str]] = {
    "openai": ("agno.models.openai", "OpenAIChat"),
    "anthropic": ("agno.models.anthropic", "Claude"),
    "groq": ("agno.models.groq", "Groq"),
    "openrouter": ("agno.models.openrouter", "OpenRouter"),
}

MOCK_PROVIDER = "mock"


@dataclass
class ExecutionContext:
    """Turn the current generation call belongs to."""

    session_id: str
    form: str
    phase: str | None = None


_execution_context: ContextVar[ExecutionContext | None] = ContextVar(
    "execution_context", default=None
)


def set_execution_context(ctx: ExecutionContext) -> None:
    _execution_context.set(ctx)


def get_execution_context() -> ExecutionContext | None:
    return _execution_context.get()


def clear_execution_context() -> None:
    _execution_context.set(None)


def _is_rate_limit(error: Exception) -> bool:
    text = str(error).lower()
    return "429" in text or ("rate" in text and "limit" in text)


class LLMExecutor:
    """Runs prompts against a primary model and its fallbacks.

    Example:
        executor = LLMExecutor("openai/gpt-4o-mini", fallback_models=["mock/offline"])
        response = await executor.generate([LLMMessage(role="user", content="Hi")])
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
        timeout: float = 60.0,
        step_name: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            model: Primary model string
            fallback_models: Tried in order when the primary fails
            timeout: Per-model timeout in seconds
            step_name: Dialogue phase served, for logs and response metadata
        """
        self._model = model
        self._fallback_models = list(fallback_models or [])
        self._timeout = timeout
        self._step_name = step_name
        self._agents: dict[tuple[str, int, float], Agent] = {}

    @property
    def model(self) -> str:
        return self._model

    @property
    def step_name(self) -> str | None:
        return self._step_name

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a reply, falling back through the model chain.

        Raises:
            ProviderError: When every model in the chain failed
        """
        chain = [self._model, *self._fallback_models]
        failures: list[str] = []

        for model in chain:
            try:
                response = await self._generate_with_model(
                    model=model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=temperature,
                )
            except ProviderError as e:
                logger.warning(
                    "generation_attempt_failed",
                    model=model,
                    step=self._step_name,
                    rate_limited=isinstance(e, RateLimitError),
                    error=str(e),
                )
                failures.append(f"{model}: {e}")
                continue

            ctx = get_execution_context()
            if ctx is not None:
                response.metadata.update(
                    session_id=ctx.session_id,
                    form=ctx.form,
                    step=self._step_name or ctx.phase,
                )
            if model != self._model:
                logger.info("generation_fell_back", model=model, step=self._step_name)
            return response

        raise ProviderError(
            f"All models failed for step {self._step_name}: " + "; ".join(failures)
        )

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        max_tokens: int,
        temperature: float,
    ) -> LLMResponse:
        provider, _ = self._parse_model(model)
        if provider == MOCK_PROVIDER:
            return self._mock_response(model)

        agent = self._agent_for(model, max_tokens, temperature)
        system = [m.content for m in messages if m.role == "system"]
        agent.instructions = system or None

        started = time.perf_counter()
        try:
            run = await asyncio.wait_for(
                agent.arun(self._render_conversation(messages)), timeout=self._timeout
            )
        except TimeoutError as e:
            raise ProviderError(f"{model} timed out after {self._timeout}s") from e
        except Exception as e:
            if _is_rate_limit(e):
                raise RateLimitError(f"{model} rate limited: {e}") from e
            raise ProviderError(f"{model} failed: {e}") from e
        latency_ms = (time.perf_counter() - started) * 1000

        content = run.content if isinstance(run.content, str) else str(run.content or "")
        logger.debug(
            "generation_complete",
            model=model,
            step=self._step_name,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )
        return LLMResponse(content=content, model=model, latency_ms=latency_ms)

    def _agent_for(self, model: str, max_tokens: int, temperature: float) -> Agent:
        key = (model, max_tokens, temperature)
        agent = self._agents.get(key)
        if agent is None:
            from agno.agent import Agent

            agent = Agent(
                model=self._agno_model(model, max_tokens=max_tokens, temperature=temperature),
                markdown=False,
            )
            self._agents[key] = agent
        return agent

    def _agno_model(self, model: str, **sampling: Any) -> Any:
        """Instantiate the agno model class for a model string.

        Raises:
            ModelError: If the provider prefix is unknown or its client
                library is not installed
        """
        provider, model_id = self._parse_model(model)
        if provider not in AGNO_MODELS:
            raise ModelError(f"Unknown provider '{provider}' in model '{model}'")

        module_name, class_name = AGNO_MODELS[provider]
        try:
            model_class = getattr(importlib.import_module(module_name), class_name)
        except ImportError as e:
            raise ModelError(f"Provider '{provider}' is not installed: {e}") from e
        return model_class(id=model_id, **sampling)

    @staticmethod
    def _render_conversation(messages: list[LLMMessage]) -> str:
        """Flatten non-system messages into a single agent input."""
        turns = [m for m in messages if m.role != "system"]
        if len(turns) == 1:
            return turns[0].content
        return "\n\n".join(f"{m.role.title()}: {m.content}" for m in turns)

    def _mock_response(self, model: str) -> LLMResponse:
        return LLMResponse(
            content=f"Mock response for {model}",
            model=model,
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5),
            latency_ms=0.0,
        )

    def _parse_model(self, model: str) -> tuple[str, str]:
        """Split a model string into (provider, model id).

        Strings without a provider prefix are treated as mock models.
        """
        provider, sep, model_id = model.partition("/")
        if not sep:
            return MOCK_PROVIDER, model
        return provider, model_id


def create_reasoning_executor(config: ReasoningConfig) -> LLMExecutor:
    """Executor for the reason phase."""
    return LLMExecutor(
        model=config.model,
        fallback_models=config.fallback_models,
        timeout=config.timeout_seconds,
        step_name="reason",
    )
