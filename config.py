"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: config.py – конфигурация приложения.

Назначение модуля:
- Определение базовых параметров приложения Flask (секретный ключ, строка подключения к БД).
- Настройка хранилища загрузок (папка, максимальный размер, допустимые расширения).
- Параметры сессий, лимитов пользователя и почты кругов.
"""

import os
import warnings


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Преобразует переменную окружения в bool."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_int(name: str, default: int) -> int:
    """Преобразует переменную окружения в int."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str] | None = None) -> list[str]:
    """Преобразует переменную окружения вида 'a,b,c' в список."""
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


def _is_production() -> bool:
    """Определяет production-режим по FLASK_ENV."""
    return os.environ.get("FLASK_ENV", "").strip().lower() == "production"


class Config:
    """Базовая конфигурация приложения."""

    _PRODUCTION = _is_production()

    SECRET_KEY = os.environ.get("SECRET_KEY")
    if not SECRET_KEY:
        if _PRODUCTION:
            raise RuntimeError(
                "SECRET_KEY environment variable is required in production. "
                "Set a strong random value before starting the app."
            )
        SECRET_KEY = "dev-insecure-secret-key"
        warnings.warn(
            "SECRET_KEY is not set. Using insecure development fallback key.",
            RuntimeWarning,
            stacklevel=1,
        )

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:////app/instance/fridge.db" if _PRODUCTION else "sqlite:///fridge.db",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ENABLED = _get_env_bool("CORS_ENABLED", default=False)
    CORS_ORIGINS = _get_env_list(
        "CORS_ORIGINS",
        default=[
            "http://127.0.0.1:3000",
            "http://localhost:3000",
        ],
    )

    # Сессии передаются заголовком, а не cookie
    SESSION_HEADER = os.environ.get("SESSION_HEADER", "X-Session-Id").strip() or "X-Session-Id"
    SESSION_TTL_SECONDS = _get_env_int("SESSION_TTL_SECONDS", 30 * 24 * 60 * 60)

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    UPLOAD_URL_PREFIX = "/uploads"
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp", "mp4", "webm", "mov"}
    ALLOWED_IMAGE_FORMATS = {"png", "jpeg", "gif", "webp"}
    MAX_IMAGE_PIXELS = _get_env_int("MAX_IMAGE_PIXELS", 40_000_000)
    ORPHAN_UPLOAD_GRACE_DAYS = _get_env_int("ORPHAN_UPLOAD_GRACE_DAYS", 1)

    DEFAULT_MAX_MAGNETS = _get_env_int("DEFAULT_MAX_MAGNETS", 2)
    DEFAULT_MAX_CALENDAR_EVENTS = _get_env_int("DEFAULT_MAX_CALENDAR_EVENTS", 1)
    DEFAULT_FRIDGE_COLOR = "#A3D8F4"
    DEFAULT_HANDLE_POSITION = "right"
    # Лимит max_magnets объявлен в схеме, но по умолчанию не применяется
    ENFORCE_MAGNET_LIMIT = _get_env_bool("ENFORCE_MAGNET_LIMIT", default=False)

    MAIL_LIST_LIMIT = _get_env_int("MAIL_LIST_LIMIT", 50)

    RATE_LIMIT_ENABLED = _get_env_bool("RATE_LIMIT_ENABLED", default=True)

    SUPPORTED_LANGUAGES = ("en", "ru")
    DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "en").strip().lower() or "en"

