from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "supervision"
    db_username: str = "supervision"
    db_password: str = "secret"

    worker_count: int = 2
    job_poll_interval_seconds: int = 1

    storage_backend: str = "local"
    storage_local_root: str = "/app/files"
    storage_http_base_url: str = ""
    storage_http_token: str = ""
    storage_http_timeout_seconds: int = 30

    pdf_engine: str = "pdfplumber"
    llmwhisperer_api_key: str = ""
    llmwhisperer_base_url: str = "https://llmwhisperer-api.us-central.unstract.com/api/v2"
    llmwhisperer_mode: str = "form"
    llmwhisperer_wait_timeout_seconds: int = 180
    llmwhisperer_poll_interval_seconds: int = 5

    analysis_cache_backend: str = "memory"
    analysis_cache_ttl_seconds: int = 3600
    redis_url: str = "redis://localhost:6379/0"
    alternative_confidence_factor: float = 0.8
    context_window_lines: int = 3
    stall_threshold_seconds: int = 120

    ai_provider: str = "gemini"
    ai_api_key: str = ""
    ai_model_name: str = "gemini-2.0-flash"
    ai_base_url: str = ""
    ai_timeout_seconds: int = 60
    ai_temperature: float = 0.2
    ai_fallback_enabled: bool = True
    ai_fallback_min_elements: int = 1

    max_upload_bytes: int = 20 * 1024 * 1024
