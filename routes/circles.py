"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: routes/circles.py – API кругов и приглашений.
"""

from flask import jsonify, request
from flask_login import current_user, login_required

from services import circles as circle_service
from utils.errors import ValidationError


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON body required")
    return data


def register_routes(app):
    @app.get("/api/circles")
    @login_required
    def list_circles():
        return jsonify(circle_service.list_circles(current_user.id))

    @app.post("/api/circles")
    @login_required
    def create_circle():
        data = _json_body()
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise ValidationError("Circle name required")
        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ValidationError("Description must be a string")

        circle = circle_service.create_circle(current_user.id, name, description)
        return jsonify(circle.to_dict())

    @app.get("/api/circles/<row_id:circle_id>/members")
    @login_required
    def list_circle_members(circle_id: int):
        members = circle_service.list_members(current_user.id, circle_id)
        return jsonify([member.to_dict() for member in members])

    @app.post("/api/circles/<row_id:circle_id>/members")
    @login_required
    def invite_circle_member(circle_id: int):
        data = _json_body()
        username = data.get("username")
        if not isinstance(username, str):
            username = None

        member = circle_service.invite_member(current_user.id, circle_id, username)
        return jsonify({"success": True, "userId": member.user_id, "username": member.user.username})
