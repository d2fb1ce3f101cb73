from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Service
    service_name: str = "sms-gateway"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./sms_gateway.db"
    database_echo: bool = False
    create_tables_on_startup: bool = True

    # Outstanding messages poll
    outstanding_take_default: int = 1
    outstanding_take_max: int = 10

    class Config:
        env_file = ".env"
        env_prefix = "SMS_GATEWAY_"
        case_sensitive = False
