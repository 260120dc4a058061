# Настройки проекта (БД, объектное хранилище, realtime)
# messenger/config.py

from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    # База данных
    DATABASE_URL: str = Field(default="sqlite:///./data/messenger.sqlite")
    LOG_LEVEL: str = Field(default="INFO")

    # S3-совместимое хранилище для изображений (опционально)
    S3_BUCKET: str | None = None
    S3_ENDPOINT: str | None = None
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None
    S3_REGION: str | None = None
    S3_PUBLIC_URL: str | None = None  # базовый URL для публичных ссылок (CDN)
    S3_KEY_PREFIX: str = Field(default="chat-images/")

    # Ограничения на изображения
    IMAGE_FETCH_TIMEOUT: int = Field(default=10, ge=1)  # секунды, для image по URL
    MAX_IMAGE_BYTES: int = Field(default=10 * 1024 * 1024, ge=1)

    # WebSocket
    WS_MAX_CONNECTIONS_PER_USER: int = Field(default=5, ge=1)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Игнорировать лишние переменные в .env

settings = Settings()
