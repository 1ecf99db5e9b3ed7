"""Dialogue engine configuration models."""

from datetime import datetime

from pydantic import BaseModel, Field


class ReasoningConfig(BaseModel):
    """Configuration for the reason phase text-generation call.

    The reason phase output is advisory only, so the call is bounded by
    a timeout and falls back to a placeholder on any failure.
    """

    enabled: bool = Field(
        default=True,
        description="Call the text-generation model during the reason phase",
    )
    model: str = Field(
        default="openai/gpt-4o-mini",
        description="Model string (provider/model, e.g. openai/gpt-4o-mini)",
    )
    fallback_models: list[str] = Field(
        default_factory=list,
        description="Models tried in order when the primary model fails",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for the reason phase call",
    )
    max_tokens: int = Field(default=1024, gt=0, description="Max tokens to generate")
    temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, description="Sampling temperature"
    )


class DialogueConfig(BaseModel):
    """Slot-filling behaviour configuration."""

    default_form: str = Field(
        default="change-of-major",
        description="Form used when a session starts without a form identifier",
    )
    free_text_field: str = Field(
        default="reason",
        description="Field that receives long unstructured replies",
    )
    deadline_warning_days: int = Field(
        default=7,
        ge=0,
        description="Days before a deadline at which turns carry a warning",
    )
    deadlines: dict[str, datetime] = Field(
        default_factory=dict,
        description="Form deadlines keyed by form type or template id",
    )
    reasoning: ReasoningConfig = Field(
        default_factory=ReasoningConfig,
        description="Reason phase settings",
    )
