"""Tool configuration loaded from the environment and .env."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

VERSION = "2.0.0"


class Settings:
    # Output
    OUTPUT_DIR: str = os.getenv("JWK_KEYGEN_OUTPUT_DIR", ".")
    JSON_INDENT: int = int(os.getenv("JWK_KEYGEN_JSON_INDENT", "4"))

    # Random key ids
    KID_BYTES: int = int(os.getenv("JWK_KEYGEN_KID_BYTES", "5"))

    # Logging
    LOG_LEVEL: str = os.getenv("JWK_KEYGEN_LOG_LEVEL", "WARNING")


@lru_cache
def get_settings() -> Settings:
    return Settings()
