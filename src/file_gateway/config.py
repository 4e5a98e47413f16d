import os
from dataclasses import dataclass


def _as_bool(value: str | None, *, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, *, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _as_float(value: str | None, *, default: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _as_list(value: str | None, *, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        return default
    items = tuple(v.strip() for v in value.split(",") if v.strip())
    return items or default


MAX_FILE_SIZE = 10 * 1024 * 1024

DEFAULT_MEDIA_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/msword",  # .doc
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",  # .docx
)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, loaded once and never mutated."""

    max_file_size: int = MAX_FILE_SIZE
    allowed_media_types: tuple[str, ...] = DEFAULT_MEDIA_TYPES
    conversion_timeout: float = 60.0
    soffice_binary: str = "soffice"
    cors_origins: tuple[str, ...] = ("*",)
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            max_file_size=_as_int(os.getenv("MAX_FILE_SIZE"), default=MAX_FILE_SIZE),
            allowed_media_types=_as_list(os.getenv("ALLOWED_MEDIA_TYPES"), default=DEFAULT_MEDIA_TYPES),
            conversion_timeout=_as_float(os.getenv("CONVERSION_TIMEOUT_SEC"), default=60.0),
            soffice_binary=os.getenv("SOFFICE_BINARY", "soffice"),
            cors_origins=_as_list(os.getenv("CORS_ORIGINS"), default=("*",)),
            debug=_as_bool(os.getenv("FILE_GATEWAY_DEBUG"), default=False),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
