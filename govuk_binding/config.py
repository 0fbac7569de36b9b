"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from .model_state import DEFAULT_MAX_ALLOWED_ERRORS


@dataclass(frozen=True)
class Config:
    bindings_file: str
    log_file: str
    log_level: str
    max_model_errors: int


def _parse_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


def load_config() -> Config:
    load_dotenv()

    return Config(
        bindings_file=os.getenv("BINDINGS_FILE", "bindings/bindings.yaml"),
        log_file=os.getenv("LOG_FILE", "logs/binding.log"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_model_errors=_parse_positive_int("MAX_MODEL_ERRORS", DEFAULT_MAX_ALLOWED_ERRORS),
    )
