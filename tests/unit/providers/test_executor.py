"""Tests for LLMExecutor."""

from unittest.mock import AsyncMock, patch

import pytest

from formchat.config.models.dialogue import ReasoningConfig
from formchat.providers.llm import (
    ExecutionContext,
    LLMExecutor,
    LLMMessage,
    ProviderError,
    RateLimitError,
    clear_execution_context,
    create_reasoning_executor,
    get_execution_context,
    set_execution_context,
)

MESSAGES = [LLMMessage(role="user", content="Hello")]


@pytest.fixture(autouse=True)
def reset_context():
    clear_execution_context()
    yield
    clear_execution_context()


class TestParseModel:
    """Tests for model string routing."""

    @pytest.mark.parametrize(
        ("model", "expected"),
        [
            ("openrouter/anthropic/claude-3-haiku", ("openrouter", "anthropic/claude-3-haiku")),
            ("openai/gpt-4o-mini", ("openai", "gpt-4o-mini")),
            ("anthropic/claude-3-haiku", ("anthropic", "claude-3-haiku")),
            ("mock/test", ("mock", "test")),
            ("plain", ("mock", "plain")),
        ],
    )
    def test_parse(self, model, expected) -> None:
        assert LLMExecutor(model)._parse_model(model) == expected


class TestGenerate:
    """Tests for LLMExecutor.generate."""

    async def test_mock_model(self) -> None:
        response = await LLMExecutor("mock/test").generate(MESSAGES)

        assert response.content == "Mock response for mock/test"
        assert response.model == "mock/test"
        assert response.usage is not None

    async def test_execution_context_recorded(self) -> None:
        set_execution_context(ExecutionContext(session_id="s1", form="change-of-major"))

        response = await LLMExecutor("mock/test", step_name="reason").generate(MESSAGES)

        assert response.metadata == {
            "session_id": "s1",
            "form": "change-of-major",
            "step": "reason",
        }

    async def test_context_phase_names_unnamed_step(self) -> None:
        set_execution_context(
            ExecutionContext(session_id="s1", form="change-of-major", phase="reason")
        )

        response = await LLMExecutor("mock/test").generate(MESSAGES)

        assert response.metadata["step"] == "reason"

    async def test_falls_back_on_provider_error(self) -> None:
        executor = LLMExecutor("openai/gpt-4o-mini", fallback_models=["mock/backup"])
        real = executor._generate_with_model

        async def fail_primary(model, **kwargs):
            if model == "openai/gpt-4o-mini":
                raise RateLimitError("slow down")
            return await real(model=model, **kwargs)

        with patch.object(executor, "_generate_with_model", side_effect=fail_primary):
            response = await executor.generate(MESSAGES)

        assert response.model == "mock/backup"

    async def test_all_models_fail(self) -> None:
        executor = LLMExecutor("openai/a", fallback_models=["openai/b"], step_name="reason")
        failing = AsyncMock(side_effect=ProviderError("down"))

        with patch.object(executor, "_generate_with_model", failing):
            with pytest.raises(ProviderError, match="All models failed for step reason"):
                await executor.generate(MESSAGES)

        assert [c.kwargs["model"] for c in failing.call_args_list] == ["openai/a", "openai/b"]


class TestExecutionContext:
    def test_set_get_clear(self) -> None:
        ctx = ExecutionContext(session_id="s1", form="tpl-1", phase="reason")
        set_execution_context(ctx)
        assert get_execution_context() is ctx
        clear_execution_context()
        assert get_execution_context() is None


class TestCreateReasoningExecutor:
    def test_from_config(self) -> None:
        executor = create_reasoning_executor(
            ReasoningConfig(model="mock/a", fallback_models=["mock/b"], timeout_seconds=3)
        )
        assert executor.model == "mock/a"
        assert executor.step_name == "reason"
