"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: routes/auth.py – маршруты аутентификации и настроек холодильника.

Назначение модуля:
- Регистрация пользователя по логину и PIN-коду.
- Вход с выдачей сессионного токена и выход с его отзывом.
- Загрузка пользователя по токену из заголовка запроса для Flask-Login.
- Чтение и изменение цвета холодильника и стороны ручки.
"""

from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from extensions import db, login_manager
from models.user import User
from services import accounts
from utils.errors import ValidationError, api_error
from utils.rate_limit import is_rate_limited


def _session_store():
    return current_app.extensions["session_store"]


def _session_token() -> str | None:
    return request.headers.get(current_app.config["SESSION_HEADER"])


@login_manager.request_loader
def load_user_from_request(req):
    """Превращает токен из заголовка в пользователя; без побочных эффектов."""
    token = req.headers.get(current_app.config["SESSION_HEADER"])
    user_id = _session_store().get(token)
    if user_id is None:
        return None
    return db.session.get(User, user_id)


def _too_many_requests():
    return api_error("Too many attempts. Please try again later.", 429)


def _credentials() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_routes(app):
    @app.post("/api/register")
    def register():
        if is_rate_limited("register", limit=10, window_seconds=15 * 60):
            return _too_many_requests()

        data = _credentials()
        user = accounts.register_user(data.get("username"), data.get("pin"))
        return jsonify({"userId": user.id, "username": user.username})

    @app.post("/api/login")
    def login():
        data = _credentials()
        username = data.get("username")
        if not isinstance(username, str):
            username = None

        if is_rate_limited("login_ip", limit=20, window_seconds=10 * 60):
            return _too_many_requests()

        username_key = (username or "").strip().lower() or "anonymous"
        if is_rate_limited("login_user", limit=10, window_seconds=10 * 60, identity=username_key):
            return _too_many_requests()

        user = accounts.authenticate(username, data.get("pin"))
        session_id = _session_store().issue(user.id)

        return jsonify(
            {
                "sessionId": session_id,
                "userId": user.id,
                "username": user.username,
                "config": accounts.user_config(user),
            }
        )

    @app.post("/api/logout")
    @login_required
    def logout():
        _session_store().invalidate(_session_token())
        return jsonify({"loggedOut": True})

    @app.get("/api/config")
    @login_required
    def get_config():
        return jsonify(accounts.user_config(current_user))

    @app.put("/api/config")
    @login_required
    def update_config():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("JSON body required")

        accounts.update_config(
            current_user.id,
            fridge_color=data.get("fridgeColor"),
            handle_position=data.get("handlePosition"),
        )
        return jsonify({"updated": True})
