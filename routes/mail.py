"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: routes/mail.py – API почты кругов.

Назначение модуля:
- Лента писем из кругов пользователя.
- Отправка письма с необязательным вложением (multipart или JSON).
- Превращение письма во вложение-магнит на холодильнике получателя.
"""

from flask import jsonify, request
from flask_login import current_user, login_required

from models import MAX_ROW_ID
from services import mail as mail_service
from utils.blob_store import get_blob_store
from utils.errors import ValidationError
from utils.media import read_upload


def _parse_circle_id(raw_value) -> int | None:
    if raw_value is None or raw_value == "":
        return None
    try:
        circle_id = int(raw_value)
    except (TypeError, ValueError):
        raise ValidationError("Circle ID required")
    if not 0 < circle_id <= MAX_ROW_ID:
        raise ValidationError("Circle ID required")
    return circle_id


def _text_field(fields, key: str) -> str | None:
    value = fields.get(key)
    return value if isinstance(value, str) else None


def _mail_payload(mail) -> dict:
    return mail.to_dict(media_url=get_blob_store().url_for(mail.media_path))


def register_routes(app):
    @app.get("/api/mail")
    @login_required
    def list_mail():
        return jsonify([_mail_payload(mail) for mail in mail_service.list_mail(current_user.id)])

    @app.post("/api/mail")
    @login_required
    def send_mail():
        if request.mimetype == "application/json":
            fields = request.get_json(silent=True)
            if not isinstance(fields, dict):
                raise ValidationError("JSON body required")
        else:
            fields = request.form

        circle_id = _parse_circle_id(fields.get("circleId"))
        if circle_id is None:
            raise ValidationError("Circle ID required")

        # Членство проверяется до записи вложения в хранилище
        mail_service.require_membership(current_user.id, circle_id)

        upload = request.files.get("file")
        media = None
        if upload is not None and upload.filename:
            media = read_upload(upload)

        store = get_blob_store()
        media_ref = store.put(media[0], media[1]) if media else None
        try:
            mail = mail_service.send_mail(
                current_user.id,
                circle_id,
                subject=_text_field(fields, "subject"),
                content=_text_field(fields, "content"),
                media_ref=media_ref,
                media_type=media[2] if media else None,
            )
        except Exception:
            store.delete(media_ref)
            raise

        return jsonify(_mail_payload(mail))

    @app.post("/api/mail/<row_id:mail_id>/convert")
    @login_required
    def convert_mail(mail_id: int):
        magnet, _mail = mail_service.convert_mail_to_magnet(current_user.id, mail_id)
        return jsonify(
            {
                "magnetId": magnet.id,
                "filePath": magnet.file_path,
                "fileType": magnet.file_type,
                "caption": magnet.caption,
                "positionX": magnet.position_x,
                "positionY": magnet.position_y,
                "rotation": magnet.rotation,
                "url": get_blob_store().url_for(magnet.file_path),
            }
        )
