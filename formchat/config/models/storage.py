"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

SessionBackendType = Literal["inmemory", "redis"]


class SessionStoreConfig(BaseModel):
    """Session store configuration.

    Both backends bound session lifetime: the in-memory store evicts by
    TTL and LRU size, the Redis store sets a key TTL.
    """

    backend: SessionBackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    ttl_seconds: int = Field(
        default=1800,  # 30 minutes
        gt=0,
        description="Idle time after which a session expires",
    )
    max_sessions: int = Field(
        default=10_000,
        gt=0,
        description="LRU bound for the in-memory store",
    )
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL",
    )
    key_prefix: str = Field(
        default="formchat:session",
        description="Redis key prefix",
    )
    lock_timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="How long a per-session turn lock may be held",
    )
    lock_blocking_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="How long a turn waits for the session lock",
    )


class StorageConfig(BaseModel):
    """Storage configuration for all stores."""

    sessions: SessionStoreConfig = Field(
        default_factory=SessionStoreConfig,
        description="Session store",
    )
