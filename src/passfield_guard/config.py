from pydantic_settings import BaseSettings

from .yaml_config import get_defaults

_defaults = get_defaults()


class Settings(BaseSettings):
    model_config = {"env_prefix": "PASSFIELD_GUARD_"}

    # Bootstrap payload (config.json); relative locations resolve against base_url
    config_url: str = _defaults.get("config_url", "config.json")
    base_url: str = _defaults.get("base_url", ".")

    # Trust list refresh
    refresh_interval_ms: int = _defaults.get("refresh_interval_ms", 60000)
    fetch_timeout_seconds: float = _defaults.get("fetch_timeout_seconds", 10.0)

    # Query retries
    max_retries: int = _defaults.get("max_retries", 3)
    retry_delay_ms: int = _defaults.get("retry_delay_ms", 100)

    # Logging
    log_level: str = _defaults.get("log_level", "info")


settings = Settings()
