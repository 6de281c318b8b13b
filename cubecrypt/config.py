from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    # Pipeline I/O
    read_buffer_size: int = Field(default=64 * 1024, ge=8, description="Bytes read per I/O call; multiple of 8")

    # Logging
    log_level: str = Field(default="INFO")

    # Evaluation / reproducibility
    global_seed: int = Field(default=1337)
    avalanche_trials: int = Field(default=64, ge=1, le=10_000)
    roundtrip_vectors: int = Field(default=200, ge=1, le=100_000)

    # Paths
    runs_dir: str = Field(default="runs")

    @field_validator("read_buffer_size")
    @classmethod
    def _whole_chunks(cls, v: int) -> int:
        if v % 8 != 0:
            raise ValueError("read_buffer_size must be a multiple of 8")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    return Settings(
        read_buffer_size=int(os.getenv("CUBECRYPT_READ_BUFFER_SIZE", str(64 * 1024))),
        log_level=os.getenv("CUBECRYPT_LOG_LEVEL", "INFO"),
        global_seed=int(os.getenv("CUBECRYPT_SEED", "1337")),
        avalanche_trials=int(os.getenv("CUBECRYPT_AVALANCHE_TRIALS", "64")),
        roundtrip_vectors=int(os.getenv("CUBECRYPT_ROUNDTRIP_VECTORS", "200")),
        runs_dir=os.getenv("CUBECRYPT_RUNS_DIR", "runs"),
    )
