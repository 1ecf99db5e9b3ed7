"""Text generation for the reason phase.

LLMExecutor routes `provider/model` strings to agno model classes and
walks a fallback chain; `mock/*` models answer locally.
"""

from formchat.providers.llm.base import (
    LLMMessage,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)
from formchat.providers.llm.executor import (
    ExecutionContext,
    LLMExecutor,
    clear_execution_context,
    create_reasoning_executor,
    get_execution_context,
    set_execution_context,
)

__all__ = [
    # Data models
    "LLMMessage",
    "LLMResponse",
    "TokenUsage",
    # Errors
    "ProviderError",
    "RateLimitError",
    "ModelError",
    # Executor
    "LLMExecutor",
    "ExecutionContext",
    "set_execution_context",
    "get_execution_context",
    "clear_execution_context",
    "create_reasoning_executor",
]
