from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Parts Inventory"
    API_PREFIX: str = "/api"

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URI: str = "sqlite:///./parts_inventory.db"
    SQL_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Used when a mutation arrives without an actor name
    DEFAULT_ACTOR_NAME: str = Field(default="user", description="Fallback name written to edit history")

    # Number of months in the dashboard inbound trend
    DASHBOARD_TREND_MONTHS: int = 6

    class Config:
        case_sensitive = True
        env_file = ".env"

    @property
    def async_database_uri(self) -> str:
        if self.DATABASE_URI.startswith("sqlite:///"):
            return self.DATABASE_URI.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return self.DATABASE_URI


settings = Settings()
logger.info(f"Settings loaded: API_PREFIX={settings.API_PREFIX}, CORS={settings.BACKEND_CORS_ORIGINS}")
