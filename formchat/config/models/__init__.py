"""Configuration section models."""

from formchat.config.models.api import APIConfig
from formchat.config.models.dialogue import DialogueConfig, ReasoningConfig
from formchat.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from formchat.config.models.storage import SessionStoreConfig, StorageConfig

__all__ = [
    "APIConfig",
    "DialogueConfig",
    "ReasoningConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "SessionStoreConfig",
    "StorageConfig",
]
