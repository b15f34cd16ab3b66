from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    # point api_base_url at the gateway (e.g. http://localhost:3001/api) to go through it
    api_base_url: str = "http://localhost:8386"
    media_base_url: str = "http://localhost:8386"
    predict_path: str = "/predict-emotion/"
    request_timeout: float | None = None
    log_level: str = "INFO"
    model_config = SettingsConfigDict(
        env_prefix="SER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def predict_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.predict_path

settings = ClientSettings()
