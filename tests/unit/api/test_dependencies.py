"""Unit tests for API dependency wiring."""

import pytest

from formchat.api.dependencies import (
    get_deadline_service,
    get_dialogue_engine,
    get_session_mutex,
    get_session_store,
    reset_dependencies,
)
from formchat.config import get_settings
from formchat.config.settings import Settings
from formchat.conversation.mutex import InProcessSessionMutex, RedisSessionMutex
from formchat.conversation.stores.inmemory import InMemorySessionStore
from formchat.conversation.stores.redis import RedisSessionStore
from formchat.forms.identifiers import HardcodedForm
from formchat.forms.models import FormType


@pytest.fixture
def settings_from(test_config_dir, mock_toml_files, env_override):
    """Load settings from a TOML body written to a temporary config dir."""

    def _load(body: str) -> Settings:
        mock_toml_files({"default.toml": body})
        with env_override({"FORMCHAT_CONFIG_DIR": str(test_config_dir), "FORMCHAT_ENV": "test"}):
            return get_settings()

    reset_dependencies()
    yield _load
    reset_dependencies()


class TestDependencies:
    """Tests for dependency singletons."""

    def test_inmemory_backend(self, settings_from) -> None:
        settings = settings_from("[storage.sessions]\nbackend = 'inmemory'\n")

        store = get_session_store(settings)

        assert isinstance(store, InMemorySessionStore)
        assert get_session_store(settings) is store
        assert isinstance(get_session_mutex(settings), InProcessSessionMutex)

    def test_redis_backend(self, settings_from) -> None:
        settings = settings_from(
            "[storage.sessions]\nbackend = 'redis'\nredis_url = 'redis://localhost:6390'\n"
        )

        assert isinstance(get_session_store(settings), RedisSessionStore)
        assert isinstance(get_session_mutex(settings), RedisSessionMutex)

    def test_deadlines_seeded_from_settings(self, settings_from) -> None:
        settings = settings_from(
            "[dialogue.deadlines]\n'graduation-application' = 2026-12-01T23:59:00Z\n"
        )

        service = get_deadline_service(settings)

        assert service.deadline(HardcodedForm(form_type=FormType.GRADUATION_APPLICATION))
        assert service.deadline(HardcodedForm(form_type=FormType.CHANGE_OF_MAJOR)) is None

    def test_engine_without_reasoning(self, settings_from) -> None:
        settings = settings_from("[dialogue.reasoning]\nenabled = false\n")

        engine = get_dialogue_engine(settings)

        assert engine is get_dialogue_engine(settings)
        assert engine._executor is None

    def test_reset(self, settings_from) -> None:
        settings = settings_from("")
        store = get_session_store(settings)

        reset_dependencies()

        assert get_session_store(settings) is not store
