"""
Модуль: `utils/errors.py`.
Назначение: Иерархия прикладных ошибок и их HTTP-статусы.

Сообщение ошибки – короткий английский идентификатор, который переводится
через Flask-Babel при формировании ответа. Параметры подставляются в
сообщение в стиле `%(name)s`.
"""

from flask import jsonify
from flask_babel import gettext


class FridgeError(Exception):
    """Базовая прикладная ошибка с HTTP-статусом и безопасным сообщением."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None, **params):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.params = params
        super().__init__(self.message % params if params else self.message)


class ValidationError(FridgeError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(FridgeError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(FridgeError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(FridgeError):
    status_code = 404
    default_message = "Not found"


class ConflictError(FridgeError):
    status_code = 409
    default_message = "Conflict"


class PersistenceError(FridgeError):
    status_code = 500
    default_message = "Internal server error"


def api_error(message: str, status: int = 400, **params):
    """JSON-ответ с переведённым сообщением в формате {"success": false, "error": ...}."""
    return jsonify({"success": False, "error": gettext(message, **params)}), status
