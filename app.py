"""
Название: «Fridge»
Язык: Python (Flask)
Краткое описание: виртуальный холодильник – магниты с фото и видео на дверце,
обратный отсчёт до события и почта кругов, которую можно превратить в магнит.
"""

import os

from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import NotFound, RequestEntityTooLarge
from werkzeug.routing import IntegerConverter

from config import Config
from extensions import db, login_manager, cors, babel
import models  # noqa: F401 - регистрирует модели для db.create_all()
from models import MAX_ROW_ID
from routes.auth import register_routes as register_auth_routes
from routes.magnets import register_routes as register_magnet_routes
from routes.calendar import register_routes as register_calendar_routes
from routes.circles import register_routes as register_circle_routes
from routes.mail import register_routes as register_mail_routes
from utils.blob_store import BlobStore, LocalBlobStore
from utils.cleanup import cleanup_orphan_uploads
from utils.errors import FridgeError, PersistenceError, api_error
from utils.rate_limit import InMemoryRateLimiter
from utils.session_store import InMemorySessionStore, SessionStore


class RowIdConverter(IntegerConverter):
    """`<row_id:...>` в URL: целое в пределах INTEGER, иначе 404."""

    def __init__(self, url_map):
        super().__init__(url_map, max=MAX_ROW_ID)


def create_app(
    overrides: dict | None = None,
    session_store: SessionStore | None = None,
    blob_store: BlobStore | None = None,
) -> Flask:
    """Фабрика приложения, собирающая все модули воедино."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    upload_folder = app.config["UPLOAD_FOLDER"]
    if not os.path.isabs(upload_folder):
        app.config["UPLOAD_FOLDER"] = os.path.join(app.root_path, upload_folder)

    # Инициализация расширений
    db.init_app(app)
    login_manager.init_app(app)
    # Токен приходит в заголовке, cookie-сессия Flask не используется
    login_manager.session_protection = None

    def select_locale() -> str:
        """Язык сообщений об ошибках выбирается по Accept-Language."""
        supported_languages: tuple[str, ...] = app.config["SUPPORTED_LANGUAGES"]
        return request.accept_languages.best_match(supported_languages) or app.config["DEFAULT_LANGUAGE"]

    babel.init_app(app, locale_selector=select_locale)

    if app.config["CORS_ENABLED"]:
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        )

    app.extensions["session_store"] = session_store or InMemorySessionStore(
        ttl_seconds=app.config["SESSION_TTL_SECONDS"]
    )
    app.extensions["blob_store"] = blob_store or LocalBlobStore(
        app.config["UPLOAD_FOLDER"],
        url_prefix=app.config["UPLOAD_URL_PREFIX"],
    )
    if app.config["RATE_LIMIT_ENABLED"]:
        app.extensions["rate_limiter"] = InMemoryRateLimiter()

    # Гарантируем наличие служебных директорий
    os.makedirs(app.instance_path, exist_ok=True)

    app.url_map.converters["row_id"] = RowIdConverter

    # Регистрация роутов по модулям
    register_auth_routes(app)
    register_magnet_routes(app)
    register_calendar_routes(app)
    register_circle_routes(app)
    register_mail_routes(app)

    with app.app_context():
        # Создаем отсутствующие таблицы (без изменения существующих колонок)
        db.create_all()

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        """Запрос без действующего токена отклоняется до бизнес-логики."""
        return api_error("Unauthorized", 401)

    @app.errorhandler(FridgeError)
    def handle_fridge_error(error: FridgeError):
        return api_error(error.message, error.status_code, **error.params)

    @app.errorhandler(SQLAlchemyError)
    def handle_persistence_error(error: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Ошибка базы данных при обработке %s %s", request.method, request.path)
        return handle_fridge_error(PersistenceError())

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        max_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return api_error("File too large. Maximum size is %(size)s MB", 400, size=max_mb)

    @app.errorhandler(NotFound)
    def handle_not_found(error):
        if request.path.startswith("/api/"):
            return api_error("Not found", 404)
        return error

    @app.after_request
    def apply_security_headers(response):
        """Выполняет операцию `apply_security_headers` в рамках сценария модуля."""
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "camera=(), microphone=(), geolocation=()")
        return response

    @app.get("/healthz")
    def healthz():
        """Выполняет операцию `healthz` в рамках сценария модуля."""
        return jsonify({"status": "ok"}), 200

    return app


app = create_app()


if __name__ == "__main__":
    with app.app_context():
        # Очистка неиспользуемых загрузок при запуске приложения
        cleanup_orphan_uploads()
    is_production = os.environ.get("FLASK_ENV", "").lower() == "production"
    app.run(debug=not is_production, port=int(os.environ.get("PORT", 3000)))
