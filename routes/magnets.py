"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: routes/magnets.py – API магнитов и геометрии дверцы.

Назначение модуля:
- Загрузка файла и создание магнита в нормализованных координатах.
- Перемещение, переименование и удаление магнитов владельцем.
- Выдача загруженных файлов и констант геометрии дверцы для клиентов.
"""

from flask import current_app, jsonify, request, send_from_directory
from flask_login import current_user, login_required

from services import magnets as magnet_service
from utils.blob_store import get_blob_store
from utils.coordinates import SCENE_DOOR, scene_normalized_bounds
from utils.errors import ValidationError
from utils.media import read_upload


def _parse_number(raw_value, field: str) -> float | None:
    """Пустое значение – None; иначе число или ValidationError."""
    if raw_value is None or raw_value == "":
        return None
    if isinstance(raw_value, bool):
        raise ValidationError("%(field)s must be a finite number", field=field)
    try:
        return float(raw_value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("%(field)s must be a finite number", field=field)


def _magnet_payload(magnet) -> dict:
    return magnet.to_dict(url=get_blob_store().url_for(magnet.file_path))


def register_routes(app):
    @app.get("/api/magnets")
    @login_required
    def list_magnets():
        return jsonify([_magnet_payload(m) for m in magnet_service.list_magnets(current_user.id)])

    @app.post("/api/magnets")
    @login_required
    def create_magnet():
        upload = request.files.get("file")
        if upload is None or upload.filename == "":
            raise ValidationError("No file uploaded")

        position_x = _parse_number(request.form.get("positionX"), "positionX")
        position_y = _parse_number(request.form.get("positionY"), "positionY")
        rotation = _parse_number(request.form.get("rotation"), "rotation")
        caption = (request.form.get("caption") or "").strip() or upload.filename

        data, content_type, file_kind = read_upload(upload)

        store = get_blob_store()
        file_ref = store.put(data, content_type)
        try:
            magnet, total = magnet_service.create_magnet(
                current_user.id,
                file_ref,
                file_type=file_kind,
                caption=caption,
                position_x=position_x,
                position_y=position_y,
                rotation=rotation,
            )
        except Exception:
            store.delete(file_ref)
            raise

        return jsonify(
            {
                "id": magnet.id,
                "filePath": magnet.file_path,
                "fileType": magnet.file_type,
                "caption": magnet.caption,
                "positionX": magnet.position_x,
                "positionY": magnet.position_y,
                "rotation": magnet.rotation,
                "url": store.url_for(magnet.file_path),
                "totalMagnets": total,
            }
        )

    @app.put("/api/magnets/<row_id:magnet_id>")
    @login_required
    def update_magnet(magnet_id: int):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("JSON body required")

        position_x = _parse_number(data.get("positionX"), "positionX")
        position_y = _parse_number(data.get("positionY"), "positionY")
        rotation = _parse_number(data.get("rotation"), "rotation")
        if position_x is None or position_y is None or rotation is None:
            raise ValidationError("positionX, positionY and rotation are required")

        caption = data.get("caption")
        if caption is not None and not isinstance(caption, str):
            raise ValidationError("Caption must be a string")

        updated = magnet_service.update_magnet_position(
            current_user.id,
            magnet_id,
            position_x,
            position_y,
            rotation,
            caption=caption,
        )
        return jsonify({"updated": updated})

    @app.delete("/api/magnets/<row_id:magnet_id>")
    @login_required
    def delete_magnet(magnet_id: int):
        return jsonify({"deleted": magnet_service.delete_magnet(current_user.id, magnet_id)})

    @app.get("/api/geometry")
    def door_geometry():
        bounds = scene_normalized_bounds(SCENE_DOOR)
        geometry = SCENE_DOOR.to_dict()
        geometry["normalizedBounds"] = {
            "minX": bounds.min_x,
            "maxX": bounds.max_x,
            "minY": bounds.min_y,
            "maxY": bounds.max_y,
        }
        return jsonify(geometry)

    @app.get(f"{app.config['UPLOAD_URL_PREFIX']}/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
