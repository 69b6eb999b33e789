from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # Database
    database_url: str = "sqlite+aiosqlite:///./budgetsync.db"
    db_echo: bool = False
    db_create_all: bool = True

    # JWT (identity is issued elsewhere; we only verify)
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_expire_minutes: int = 60

    # Transaction provider (Plaid)
    plaid_client_id: str = ""
    plaid_secret: str = ""
    plaid_env: str = "sandbox"
    plaid_client_name: str = "Budget Sync"
    plaid_country_codes: list[str] = ["US", "CA"]
    plaid_timeout_seconds: float = 30.0

    # Sync
    sync_page_size: int = 250
    sync_max_mutation_retries: int = 3
    sync_timeout_seconds: float = 120.0

    # Money / amounts
    currency_minor_unit: int = 2


settings = Settings()
