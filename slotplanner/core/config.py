from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_NAME: str = "Your Workshop"
    BUSINESS_TIMEZONE: str = "Australia/Perth"

    MECHANICS_COUNT: int = 1
    MIN_LEAD_MINUTES: int = 120
    MAX_SELECTIONS: int = 4
    DEFAULT_SERVICE_DURATION_MINUTES: int = 60

    BOOKING_API_BASE_URL: str | None = None
    BOOKING_API_TOKEN: str | None = None
    BOOKING_API_TIMEOUT_SECONDS: float = 10.0

    @field_validator("MECHANICS_COUNT", mode="before")
    @classmethod
    def default_mechanics(cls, value: object) -> int:
        # Unset, blank or non-positive counts fall back to a single mechanic.
        try:
            count = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 1
        return count if count > 0 else 1


settings = Settings()
