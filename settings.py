import sys
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine base path (works for both dev and PyInstaller exe)
if getattr(sys, 'frozen', False):
    BASE_DIR = Path(sys.executable).parent
else:
    BASE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    THREADS: int = 4

    # Question source: a file path or an http(s) URL
    QUESTIONS_SOURCE: str = str(BASE_DIR / "questions.json")
    STATIC_DIR: Path = BASE_DIR / "static"

    # Fixed for the lifetime of the process
    PAGE_SIZE: int = 10

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


settings = Settings()
