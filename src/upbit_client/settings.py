from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upbit
    upbit_access_key: str = Field(default="", validation_alias="UPBIT_ACCESS_KEY")
    upbit_secret_key: str = Field(default="", validation_alias="UPBIT_SECRET_KEY")
    upbit_base_url: str = Field(default="https://api.upbit.com", validation_alias="UPBIT_BASE_URL")
    upbit_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        validation_alias="UPBIT_TIMEOUT_SECONDS",
    )

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def has_credentials(self) -> bool:
        return bool(self.upbit_access_key.strip() and self.upbit_secret_key.strip())
