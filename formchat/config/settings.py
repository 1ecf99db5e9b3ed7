"""Root settings model.

Precedence, lowest first: field defaults, the layered TOML files,
FORMCHAT_* environment variables (`__` separates nested keys), then
constructor arguments.
"""

from typing import Any

from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from formchat.config.loader import load_config
from formchat.config.models.api import APIConfig
from formchat.config.models.dialogue import DialogueConfig
from formchat.config.models.observability import ObservabilityConfig
from formchat.config.models.storage import StorageConfig


class LayeredTomlSource(PydanticBaseSettingsSource):
    """Settings source backed by config/default.toml and its overlay."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._values = load_config()

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        value = self._values.get(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, Any]:
        return {
            name: self._values[name]
            for name in self.settings_cls.model_fields
            if name in self._values
        }


class Settings(BaseSettings):
    """All formchat configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FORMCHAT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="formchat", description="Service name")
    debug: bool = Field(default=False)

    api: APIConfig = Field(default_factory=APIConfig)
    dialogue: DialogueConfig = Field(default_factory=DialogueConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, LayeredTomlSource(settings_cls)
