from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    output_dir: str = "output"

    asset_fetch_timeout_seconds: float = 5.0
    asset_max_bytes: int = 5 * 1024 * 1024

    watermark_text: str = "COA Processor - Free Version"
    downloads_per_month: int = 60

    storage_backend: str = "memory"
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "coa_processor"
    db_username: str = "coa_processor"
    db_password: str = "secret"

    pdf_engine: str = "pdfplumber"

    extraction_provider: str = "openai"
    extraction_min_text_chars: int = 100
    extraction_max_pages: int = 5
    extraction_openai_api_key: str = ""
    extraction_openai_model_name: str = "gpt-4o"
    extraction_openai_timeout_seconds: int = 60
    extraction_openai_temperature: float = 0.1
    extraction_openai_compatible_api_key: str = ""
    extraction_openai_compatible_model_name: str = ""
    extraction_openai_compatible_base_url: str | None = None
    extraction_openai_compatible_timeout_seconds: int = 60
    extraction_openrouter_api_key: str = ""
    extraction_openrouter_model_name: str = ""
    extraction_openrouter_timeout_seconds: int = 60
    extraction_groq_api_key: str = ""
    extraction_groq_model_name: str = ""
    extraction_groq_timeout_seconds: int = 60
