"""
Runtime configuration loaded from environment variables (and .env).
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables
load_dotenv()


class Settings(BaseModel):
    """Service settings. Build from the environment with `Settings.from_env()`."""

    data_root: str = Field(
        default="/data", description="Directory holding one image per screen"
    )
    service_name: str = Field(
        default="trmnl-byos-python", description="Name reported by the health check"
    )
    firmware_path: str = Field(
        default="/firmware/latest.bin",
        description="Static path appended to the request origin for firmware_url",
    )
    default_refresh_rate: int = Field(
        default=100, description="Refresh rate used when REFRESH_RATE is unusable"
    )
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if not isinstance(logging.getLevelName(upper), int):
            raise ValueError(f"Invalid log_level '{v}'")
        return upper

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from the process environment.

        Each field is read from the upper-cased variable of the same name
        (DATA_ROOT, LOG_LEVEL, ...). Unset variables keep the field default.
        """
        values = {
            name: os.environ[name.upper()]
            for name in cls.model_fields
            if name.upper() in os.environ
        }
        return cls(**values)
