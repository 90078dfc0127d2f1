"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="RETAILPRO_", extra="ignore"
    )

    # Database (key-value store for the three collections)
    database_url: str = "sqlite:///./retailpro.db"

    # External Services
    assistant_api_base: str = ""  # empty disables the HTTP assistant
    shop_type: str = "General Retail"
    whatsapp_base_url: str = "https://wa.me"
    messaging_webhook_url: str = ""  # empty: log the wa.me link only

    # Service
    service_name: str = "retailpro"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Billing
    default_due_days: int = 7
    default_sgst: float = 9.0
    default_cgst: float = 9.0
    currency_symbol: str = "₹"

    # Inventory
    stock_match_mode: str = "all"  # "all" | "strict"
    min_suggestion_query_length: int = 3


settings = Settings()
