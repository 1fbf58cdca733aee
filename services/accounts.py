"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: services/accounts.py – регистрация, проверка PIN-кода и настройки холодильника.
"""

import re

from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from models.user import User
from utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError

HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
HANDLE_POSITIONS = {"left", "right"}


def _validate_username(username: str) -> str | None:
    if not username:
        return "Username and PIN required"
    if len(username) < 3:
        return "Username must be at least 3 characters"
    if len(username) > 80:
        return "Username must not exceed 80 characters"
    if any(ch.isspace() for ch in username):
        return "Username must not contain spaces"
    return None


def register_user(username: str | None, pin: str | None) -> User:
    username = username.strip() if isinstance(username, str) else ""
    pin = pin if isinstance(pin, str) else ("" if pin is None else str(pin))

    if not username or not pin:
        raise ValidationError("Username and PIN required")

    username_error = _validate_username(username)
    if username_error:
        raise ValidationError(username_error)

    # Дубликат сообщаем как 400, как и остальные ошибки формы регистрации
    if User.query.filter_by(username=username).first():
        raise ConflictError("Username already exists", status_code=400)

    cfg = current_app.config
    user = User(
        username=username,
        pin_hash=generate_password_hash(pin, method="scrypt"),
        max_magnets=cfg["DEFAULT_MAX_MAGNETS"],
        max_calendar_events=cfg["DEFAULT_MAX_CALENDAR_EVENTS"],
        fridge_color=cfg["DEFAULT_FRIDGE_COLOR"],
        handle_position=cfg["DEFAULT_HANDLE_POSITION"],
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Username already exists", status_code=400)

    current_app.logger.info("Зарегистрирован пользователь %s (id=%s)", username, user.id)
    return user


def authenticate(username: str | None, pin: str | None) -> User:
    if not isinstance(username, str) or not username or not pin:
        raise AuthenticationError("Invalid credentials")

    user = User.query.filter_by(username=username.strip()).first()
    if user is None or not check_password_hash(user.pin_hash, str(pin)):
        current_app.logger.warning("Неудачная попытка входа для %s", username)
        raise AuthenticationError("Invalid credentials")
    return user


def user_config(user: User) -> dict:
    return {
        "fridgeColor": user.fridge_color,
        "handlePosition": user.handle_position,
        "maxMagnets": user.max_magnets,
        "maxCalendarEvents": user.max_calendar_events,
    }


def update_config(user_id: int, fridge_color: str | None = None, handle_position: str | None = None) -> User:
    """Обновляет цвет и сторону ручки; непереданные поля не меняются."""
    if fridge_color is not None and not (isinstance(fridge_color, str) and HEX_COLOR_RE.match(fridge_color)):
        raise ValidationError("Fridge color must be a HEX code like #A3D8F4")
    if handle_position is not None and not (
        isinstance(handle_position, str) and handle_position in HANDLE_POSITIONS
    ):
        raise ValidationError("Handle position must be 'left' or 'right'")

    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    if fridge_color is not None:
        user.fridge_color = fridge_color.upper()
    if handle_position is not None:
        user.handle_position = handle_position
    db.session.commit()
    return user
