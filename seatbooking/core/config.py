from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SEAT_ROWS_PER_PAGE: int = 4

    SEARCH_DEBOUNCE_MS: int = 300
    STUDENT_SEARCH_MIN_CHARS: int = 2
    STUDENT_SEARCH_LIMIT: int = 5

    CATALOG_PATH: str | None = "./data/catalog.json"
    INVENTORY_API_BASE_URL: str | None = None

    BOOKING_API_BASE_URL: str | None = None
    BOOKING_API_KEY: str | None = None

    HTTP_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
