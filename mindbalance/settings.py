import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    APP_VERSION: str = "1.0.0"
    SERVICE_NAME: str = "mcp-mind-argumentation"
    PROTOCOL_VERSION: str = "2024-11-05"

    # --- CONFIG ---
    ENV = os.getenv("MINDBALANCE_ENV", "production")
    CONFIG_PATH = os.getenv("MINDBALANCE_CONFIG") or None
    LOG_LEVEL = os.getenv("MINDBALANCE_LOG_LEVEL", "INFO")
    ADMIN_KEY = os.getenv("MINDBALANCE_ADMIN_KEY", "change-me")


@lru_cache
def get_settings():
    return Settings()
