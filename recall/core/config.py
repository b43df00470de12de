"""Environment-driven configuration with Pydantic v2."""

import math
from typing import Literal, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from recall.models.cache import NEVER


class Settings(BaseSettings):
    """Engine settings, read once at startup from RECALL_* environment variables."""

    # Storage backend
    adapter: Literal["memory", "redis"] = Field(default="memory")

    # Expiration (milliseconds)
    default_ttl: Union[int, Literal["never"]] = Field(default=300_000)
    sweep_interval: int = Field(default=5_000, ge=1)

    # Redis backend
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_key_prefix: str = Field(default="recall:")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    @field_validator("default_ttl", mode="before")
    @classmethod
    def validate_default_ttl(cls, v):
        """Accept the never synonyms and reject non-positive durations."""
        if isinstance(v, str) and v.strip().lower() in (NEVER, "infinity"):
            return NEVER
        if isinstance(v, float) and math.isinf(v) and v > 0:
            return NEVER
        if isinstance(v, bool):
            raise ValueError("default_ttl must be a positive number of milliseconds or 'never'")
        if isinstance(v, str):
            v = int(v.strip())
        if not isinstance(v, int) or v <= 0:
            raise ValueError("default_ttl must be a positive number of milliseconds or 'never'")
        return v

    @property
    def sweep_interval_seconds(self) -> float:
        return self.sweep_interval / 1000

    model_config = {
        "env_prefix": "RECALL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }
