from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Gaming Center POS API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "gamecenter_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Only these categories may price more than one person per seat (e.g. PS5 couch co-op)
    MULTI_PERSON_CATEGORIES: List[str] = ["PS5"]

    # Background work
    ENABLE_BACKGROUND_SWEEPS: bool = True
    STATUS_SWEEP_INTERVAL_SECONDS: int = 5
    DAILY_SWEEP_HOUR: int = 2

    # Archival policy for expired (never completed) sessions
    ARCHIVE_EXPIRED_ON_REFRESH: bool = True
    ARCHIVE_EXPIRED_ON_SWEEP: bool = True
    EXPIRED_ARCHIVE_GRACE_MINUTES: int = 30

    # Retention, applied by the daily sweep
    BOOKING_HISTORY_RETENTION_DAYS: int = 365
    EXPENSE_RETENTION_DAYS: int = 730

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    def allows_multi_person(self, category: str) -> bool:
        return category.upper() in {c.upper() for c in self.MULTI_PERSON_CATEGORIES}


settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
