# firealert/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from .errors import ConfigurationError


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    MONGODB_URI: str = ""
    DATABASE_NAME: str = "fire_detection"
    COLLECTION_NAME: str = "fire_events"

    # empty -> auth disabled
    API_KEY: str = ""

    WHATSAPP_PHONE_NUMBER_ID: str = ""
    WHATSAPP_ACCESS_TOKEN: str = ""
    WHATSAPP_TO: str = ""
    WHATSAPP_API_BASE: str = "https://graph.facebook.com"
    WHATSAPP_API_VERSION: str = "v20.0"

    MAX_BODY_BYTES: int = 1024 * 1024
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @property
    def auth_enabled(self) -> bool:
        return bool(self.API_KEY)

    @property
    def notifications_enabled(self) -> bool:
        return bool(
            self.WHATSAPP_TO
            and self.WHATSAPP_PHONE_NUMBER_ID
            and self.WHATSAPP_ACCESS_TOKEN
        )

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def require_database(self) -> str:
        uri = self.MONGODB_URI.strip()
        if not uri:
            raise ConfigurationError("MONGODB_URI missing. Set it in .env")
        return uri


def get_settings() -> Settings:
    return Settings()
