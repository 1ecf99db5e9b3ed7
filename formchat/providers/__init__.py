"""External AI services.

Only text generation is used: the dialogue engine's reason phase calls an
LLMExecutor for advisory analysis of each user message.
"""

from formchat.providers.llm import LLMExecutor, ProviderError, create_reasoning_executor

__all__ = [
    "LLMExecutor",
    "ProviderError",
    "create_reasoning_executor",
]
