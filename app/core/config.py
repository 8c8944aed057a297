from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "openapi-ui-schema"
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"

    # OpenAPI document served by the API; the bundled sample when unset
    document_path: str | None = None

    mock_seed_rows: int = 5

settings = Settings()
