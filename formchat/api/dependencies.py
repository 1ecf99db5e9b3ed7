"""Dependency injection for API routes.

Provides FastAPI dependencies for stores, providers and the dialogue
engine. Dependencies are configured from settings and can be overridden
for testing via `app.dependency_overrides`.
"""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from formchat.config import get_settings
from formchat.config.settings import Settings
from formchat.conversation.mutex import (
    InProcessSessionMutex,
    RedisSessionMutex,
    SessionMutex,
)
from formchat.conversation.store import SessionStore
from formchat.conversation.stores.inmemory import InMemorySessionStore
from formchat.conversation.stores.redis import RedisSessionStore
from formchat.deadlines.service import DeadlineService
from formchat.dialogue.engine import DialogueEngine
from formchat.forms.identifiers import parse_form_identifier
from formchat.forms.resolver import CatalogSchemaResolver
from formchat.forms.store import FormTemplateStore
from formchat.forms.stores.inmemory import InMemoryFormTemplateStore
from formchat.observability.logging import get_logger
from formchat.providers.llm import create_reasoning_executor
from formchat.student_data.autofill import StudentDataAutoFill
from formchat.student_data.store import StudentDataStore
from formchat.student_data.stores.inmemory import InMemoryStudentDataStore

logger = get_logger(__name__)

# Client and store instances - created once and reused
_redis_client: redis.Redis | None = None
_session_store: SessionStore | None = None
_session_mutex: SessionMutex | None = None
_template_store: FormTemplateStore | None = None
_student_data_store: StudentDataStore | None = None
_deadline_service: DeadlineService | None = None
_dialogue_engine: DialogueEngine | None = None


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_redis_client(settings: SettingsDep) -> redis.Redis:
    """Get the shared Redis client, created on first access."""
    global _redis_client
    if _redis_client is None:
        url = settings.storage.sessions.redis_url
        _redis_client = redis.from_url(url, decode_responses=True)
        logger.info("redis_client_created", url=url.split("@")[-1])  # Log without credentials
    return _redis_client


def get_session_store(settings: SettingsDep) -> SessionStore:
    """Get the SessionStore instance for the configured backend."""
    global _session_store
    if _session_store is None:
        config = settings.storage.sessions
        if config.backend == "redis":
            _session_store = RedisSessionStore(
                get_redis_client(settings),
                ttl_seconds=config.ttl_seconds,
                key_prefix=config.key_prefix,
            )
        else:
            _session_store = InMemorySessionStore(
                ttl_seconds=config.ttl_seconds,
                max_sessions=config.max_sessions,
            )
        logger.info("session_store_initialized", store_type=config.backend)
    return _session_store


def get_session_mutex(settings: SettingsDep) -> SessionMutex:
    """Get the per-session turn lock matching the session backend."""
    global _session_mutex
    if _session_mutex is None:
        config = settings.storage.sessions
        if config.backend == "redis":
            _session_mutex = RedisSessionMutex(
                get_redis_client(settings),
                lock_timeout=config.lock_timeout_seconds,
                blocking_timeout=config.lock_blocking_timeout_seconds,
            )
        else:
            _session_mutex = InProcessSessionMutex(
                blocking_timeout=config.lock_blocking_timeout_seconds,
            )
    return _session_mutex


def get_template_store() -> FormTemplateStore:
    """Get the FormTemplateStore instance."""
    global _template_store
    if _template_store is None:
        _template_store = InMemoryFormTemplateStore()
    return _template_store


def get_student_data_store() -> StudentDataStore:
    """Get the StudentDataStore instance."""
    global _student_data_store
    if _student_data_store is None:
        _student_data_store = InMemoryStudentDataStore()
    return _student_data_store


def get_deadline_service(settings: SettingsDep) -> DeadlineService:
    """Get the DeadlineService, seeded from configured deadlines."""
    global _deadline_service
    if _deadline_service is None:
        _deadline_service = DeadlineService()
        for form_value, deadline in settings.dialogue.deadlines.items():
            _deadline_service.set_deadline(parse_form_identifier(form_value), deadline)
    return _deadline_service


def get_dialogue_engine(settings: SettingsDep) -> DialogueEngine:
    """Get the DialogueEngine wired to the configured stores."""
    global _dialogue_engine
    if _dialogue_engine is None:
        reasoning = settings.dialogue.reasoning
        _dialogue_engine = DialogueEngine(
            resolver=CatalogSchemaResolver(get_template_store()),
            session_store=get_session_store(settings),
            executor=create_reasoning_executor(reasoning) if reasoning.enabled else None,
            config=settings.dialogue,
            session_mutex=get_session_mutex(settings),
            auto_fill=StudentDataAutoFill(get_student_data_store()),
            deadlines=get_deadline_service(settings),
        )
        logger.info(
            "dialogue_engine_initialized",
            reasoning_enabled=reasoning.enabled,
            reasoning_model=reasoning.model,
        )
    return _dialogue_engine


def reset_dependencies() -> None:
    """Drop all cached instances. Used by tests."""
    global _redis_client, _session_store, _session_mutex, _template_store
    global _student_data_store, _deadline_service, _dialogue_engine
    _redis_client = None
    _session_store = None
    _session_mutex = None
    _template_store = None
    _student_data_store = None
    _deadline_service = None
    _dialogue_engine = None


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
DialogueEngineDep = Annotated[DialogueEngine, Depends(get_dialogue_engine)]
