"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: routes/calendar.py – API обратного отсчёта.
"""

from flask import jsonify, request
from flask_login import current_user, login_required

from services import calendar as calendar_service
from utils.errors import ValidationError


def _event_fields() -> tuple:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON body required")
    # Клиент 3D-сцены называет заголовок события "name"
    title = data.get("title") or data.get("name")
    if title is not None and not isinstance(title, str):
        raise ValidationError("Event title required")
    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string")
    return title, data.get("date"), description


def register_routes(app):
    @app.get("/api/calendar")
    @login_required
    def list_calendar_events():
        events = calendar_service.list_events(current_user.id)
        return jsonify([event.to_dict() for event in events])

    @app.post("/api/calendar")
    @login_required
    def create_calendar_event():
        title, raw_date, description = _event_fields()
        event = calendar_service.create_event(current_user.id, title, raw_date, description)
        return jsonify(event.to_dict())

    @app.put("/api/calendar/active")
    @login_required
    def replace_calendar_countdown():
        title, raw_date, description = _event_fields()
        event = calendar_service.replace_active_countdown(current_user.id, title, raw_date, description)
        return jsonify(event.to_dict())

    @app.delete("/api/calendar/<row_id:event_id>")
    @login_required
    def delete_calendar_event(event_id: int):
        return jsonify({"deleted": calendar_service.delete_event(current_user.id, event_id)})
