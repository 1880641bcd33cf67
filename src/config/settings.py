from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    database_url: str = "sqlite+aiosqlite:///./readlater.db"

    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev"
    firecrawl_timeout: float = 60.0
    firecrawl_max_retries: int = 2

    hf_api_token: str = ""
    summary_model: str = "meta-llama/Llama-4-Scout-17B-16E-Instruct"
    tag_model: str = "Qwen/Qwen3-32B"

    log_level: str = "INFO"
    app_host: str = "0.0.0.0"
    app_port: int = 8000


settings = Settings()
