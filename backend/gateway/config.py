from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    upstream_url: str = "http://0.0.0.0:8386"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    # plain PORT wins so the usual deployment variable works unchanged
    port: int = Field(default=3001, validation_alias=AliasChoices("PORT", "GATEWAY_PORT"))
    upstream_timeout: float | None = None
    log_level: str = "INFO"
    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
