"""Application configuration settings."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel


# Ensure environment variables from a .env file are loaded before accessing them.
load_dotenv()


class Settings(BaseModel):
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "3000"))
    WS_PATH: str = os.getenv("WS_PATH", "/ws")
    SEND_TIMEOUT: float = float(os.getenv("SEND_TIMEOUT", "5.0"))
    ANNOUNCE_PRESENCE: bool = os.getenv("ANNOUNCE_PRESENCE", "true").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
