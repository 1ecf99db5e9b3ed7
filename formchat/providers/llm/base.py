"""Request, response and error types for text generation."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from formchat.errors import FormChatError


class LLMMessage(BaseModel):
    """One prompt message."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"] = Field(..., description="Message author")
    content: str = Field(..., description="Message text")


class TokenUsage(BaseModel):
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class LLMResponse(BaseModel):
    """Generated text plus where it came from."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model string that answered")
    usage: TokenUsage | None = Field(default=None, description="Token counts, when reported")
    latency_ms: float | None = Field(default=None, description="Wall time of the call")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Turn context the call was made under"
    )


class ProviderError(FormChatError):
    """A text-generation call failed.

    The reason phase recovers from this locally; it never reaches callers
    of the dialogue engine.
    """


class RateLimitError(ProviderError):
    """The provider throttled the call."""


class ModelError(ProviderError):
    """The model string names no known provider."""
