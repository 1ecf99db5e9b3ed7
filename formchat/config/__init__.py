"""formchat configuration.

Usage:
    from formchat.config import get_settings

    timeout = get_settings().dialogue.reasoning.timeout_seconds
"""

from functools import lru_cache

from formchat.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once from TOML files and the environment."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read them again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
