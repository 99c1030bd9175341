import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .security import validate_command_break

OptionValue = str | int | float | None


def _default_concurrency() -> int:
    return os.cpu_count() or 4


class ConversionJob(BaseModel):
    """Immutable description of one document conversion run."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    output_directory: Path
    base_name: str
    extension: str = "png"
    convert_options: dict[str, OptionValue] = Field(default_factory=dict)
    graphicsmagick: bool = False
    combine: bool = False
    max_concurrency: int = Field(default_factory=_default_concurrency, ge=1)
    command_timeout_sec: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("source_path") is None:
            return data
        data = dict(data)
        # Validate before deriving so the defaults come from a checked path.
        source = Path(validate_command_break(str(data["source_path"])))
        if not data.get("output_directory"):
            data["output_directory"] = source.parent
        if not data.get("base_name"):
            data["base_name"] = source.stem
        if not data.get("extension"):
            data.pop("extension", None)
        return data

    @field_validator("source_path", "output_directory", "base_name", "extension", mode="before")
    @classmethod
    def _no_command_break(cls, v: object) -> object:
        if isinstance(v, (str, Path)):
            validate_command_break(str(v))
        return v

    @field_validator("convert_options", mode="before")
    @classmethod
    def _check_options(cls, v: object) -> object:
        if v is None:
            return {}
        if isinstance(v, dict):
            for flag, value in v.items():
                validate_command_break(str(flag))
                if value is not None:
                    validate_command_break(str(value))
        return v

    @field_validator("command_timeout_sec", mode="before")
    @classmethod
    def _zero_timeout_is_none(cls, v: object) -> object:
        return None if v in (0, "", None) else v


class Settings(BaseModel):
    """Process-level settings for the command line tool."""

    model_config = ConfigDict(frozen=True)

    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"
    log_max_bytes: int = 5 * 1024 * 1024
    log_backups: int = 5
    # Conversion
    max_concurrency: int = Field(default_factory=_default_concurrency, ge=1)
    command_timeout_sec: float | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    @field_validator("log_file", mode="before")
    @classmethod
    def _ensure_log_path(cls, v: str | Path | None) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()


def _int_env(name: str, default: int | None) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    log_file_raw = os.getenv("LOG_FILE", "").strip()
    log_file = Path(log_file_raw).expanduser().resolve() if log_file_raw else None
    log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    log_max_bytes = _int_env("LOG_MAX_BYTES", 5 * 1024 * 1024)
    log_backups = _int_env("LOG_BACKUPS", 5)

    max_concurrency = _int_env("MAX_CONCURRENCY", None) or _default_concurrency()
    timeout = _int_env("COMMAND_TIMEOUT_SEC", None) or None

    return Settings(
        log_file=log_file,
        log_level=log_level,
        log_max_bytes=log_max_bytes,
        log_backups=log_backups,
        max_concurrency=max_concurrency,
        command_timeout_sec=timeout,
    )
