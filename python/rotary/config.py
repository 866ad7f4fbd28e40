from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Secret generation
    prefix_length: int = Field(default=16, ge=0)

    # Framing
    mode: Literal["deep", "shallow"] = Field(default="deep")
    tagged: bool = Field(default=True)

    # Paths
    secret_path: Optional[str] = Field(default=None, description="Default secret file for the CLI")

    # Logging
    log_level: str = Field(default="WARNING")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _bool(name: str, default: bool) -> bool:
        v = os.getenv(name)
        if v is None:
            return default
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}

    return Settings(
        prefix_length=os.getenv("ROTARY_PREFIX_LENGTH", "16"),
        mode=os.getenv("ROTARY_MODE", "deep").strip().lower(),
        tagged=_bool("ROTARY_TAGGED", True),
        secret_path=os.getenv("ROTARY_SECRET_PATH"),
        log_level=os.getenv("ROTARY_LOG_LEVEL", "WARNING").upper(),
    )
