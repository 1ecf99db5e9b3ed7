"""Shared test fixtures for the formchat test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from formchat.config.models.dialogue import DialogueConfig, ReasoningConfig
from formchat.conversation.stores.inmemory import InMemorySessionStore
from formchat.deadlines.service import DeadlineService
from formchat.dialogue.engine import DialogueEngine
from formchat.forms.resolver import CatalogSchemaResolver
from formchat.forms.stores.inmemory import InMemoryFormTemplateStore
from formchat.student_data.autofill import StudentDataAutoFill
from formchat.student_data.stores.inmemory import InMemoryStudentDataStore
from tests.factories.forms import FormTemplateFactory


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"FORMCHAT_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from formchat.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Dialogue engine wiring
# =============================================================================


@pytest.fixture
def template_store() -> InMemoryFormTemplateStore:
    """Template store seeded with the three-field test template."""
    return InMemoryFormTemplateStore([FormTemplateFactory.major_request()])


@pytest.fixture
def resolver(template_store: InMemoryFormTemplateStore) -> CatalogSchemaResolver:
    """Catalog resolver over the test template store."""
    return CatalogSchemaResolver(template_store)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    """In-memory session store."""
    return InMemorySessionStore()


@pytest.fixture
def student_data_store() -> InMemoryStudentDataStore:
    """Empty student data store."""
    return InMemoryStudentDataStore()


@pytest.fixture
def deadlines() -> DeadlineService:
    """Deadline service with no deadlines set."""
    return DeadlineService()


@pytest.fixture
def dialogue_config() -> DialogueConfig:
    """Dialogue config with the reason phase disabled."""
    return DialogueConfig(reasoning=ReasoningConfig(enabled=False))


@pytest.fixture
def engine(
    resolver: CatalogSchemaResolver,
    session_store: InMemorySessionStore,
    student_data_store: InMemoryStudentDataStore,
    deadlines: DeadlineService,
    dialogue_config: DialogueConfig,
) -> DialogueEngine:
    """Dialogue engine over in-memory collaborators, without reasoning."""
    return DialogueEngine(
        resolver=resolver,
        session_store=session_store,
        config=dialogue_config,
        auto_fill=StudentDataAutoFill(student_data_store),
        deadlines=deadlines,
    )
