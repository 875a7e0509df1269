from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    REDIS_URL: str = "redis://localhost:6379/0"
    RQ_QUEUE: str = "peaks"

    STORAGE_BACKEND: str = "local"
    STORAGE_DIR: str = "./data"
    SAMPLES_BUCKET: str = "samples"

    TARGET_PEAKS: int = 300
    # reject data-before-fmt and bit depths other than 16/24/32
    STRICT_WAV: bool = False

    BATCH_DEFAULT_LIMIT: int = 10
    BATCH_MAX_LIMIT: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
os.makedirs(settings.STORAGE_DIR, exist_ok=True)
