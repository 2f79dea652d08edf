from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class DaemonConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TUNNELSETTINGS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "INFO"

    # Directory holding the persisted settings document.
    settings_dir: str = "/etc/tunnelsettings"
    settings_file: str = "settings.json"

    # Count loads and changes in the process-wide prometheus registry.
    metrics_enabled: bool = True

    @property
    def settings_path(self) -> Path:
        return Path(self.settings_dir) / self.settings_file


@lru_cache(maxsize=1)
def get_config() -> DaemonConfig:
    return DaemonConfig()
