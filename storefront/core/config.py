from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "storefront-api"

    DATABASE_URL: str
    SQL_ECHO: bool = False

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    ADMIN_JWT_SECRET: str = "change_me_admin"
    ADMIN_JWT_TTL_MINUTES: int = 240

    DEFAULT_PAGE: int = 1
    DEFAULT_PAGE_LIMIT: int = 10
    SLUG_FALLBACK: str = "item"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
