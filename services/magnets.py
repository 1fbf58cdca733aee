"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: services/magnets.py – операции над магнитами пользователя.

Назначение модуля:
- Список, создание, перемещение и удаление магнитов в рамках одного владельца.
- Координаты сохраняются ровно в том виде, в каком их прислал клиент
  (нормализованные значения, поворот в градусах), без серверного ограничения.
- Изменение или удаление чужого либо несуществующего магнита возвращает 0 строк;
  попытка тронуть чужой магнит дополнительно пишется в лог.
"""

import math

from flask import current_app

from extensions import db
from models.magnet import Magnet
from models.user import User
from utils.blob_store import get_blob_store
from utils.errors import NotFoundError, ValidationError

FILE_TYPES = {"image", "video"}


def _finite(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("%(field)s must be a finite number", field=name)
    try:
        value = float(value)
    except OverflowError:
        raise ValidationError("%(field)s must be a finite number", field=name)
    if not math.isfinite(value):
        raise ValidationError("%(field)s must be a finite number", field=name)
    return value


def _log_foreign_access(action: str, user_id: int, magnet_id: int) -> None:
    owner_id = db.session.query(Magnet.user_id).filter(Magnet.id == magnet_id).scalar()
    if owner_id is not None and owner_id != user_id:
        current_app.logger.warning(
            "Пользователь %s пытался выполнить %s над чужим магнитом %s (владелец %s)",
            user_id,
            action,
            magnet_id,
            owner_id,
        )
    else:
        current_app.logger.info("%s: магнит %s не найден (пользователь %s)", action, magnet_id, user_id)


def list_magnets(user_id: int) -> list[Magnet]:
    return (
        Magnet.query.filter_by(user_id=user_id)
        .order_by(Magnet.created_at.desc(), Magnet.id.desc())
        .all()
    )


def count_magnets(user_id: int) -> int:
    return Magnet.query.filter_by(user_id=user_id).count()


def create_magnet(
    user_id: int,
    file_ref: str | None,
    file_type: str = "image",
    caption: str | None = None,
    position_x: float | None = None,
    position_y: float | None = None,
    rotation: float | None = None,
) -> tuple[Magnet, int]:
    """Создаёт магнит и возвращает его вместе с общим числом магнитов пользователя."""
    if not file_ref:
        raise ValidationError("No file uploaded")
    if file_type not in FILE_TYPES:
        raise ValidationError("File type must be image or video")

    position_x = 0.0 if position_x is None else _finite(position_x, "positionX")
    position_y = 0.0 if position_y is None else _finite(position_y, "positionY")
    rotation = 0.0 if rotation is None else _finite(rotation, "rotation")

    current_count = count_magnets(user_id)

    if current_app.config.get("ENFORCE_MAGNET_LIMIT"):
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if current_count >= user.max_magnets:
            raise ValidationError("Maximum %(limit)s magnets allowed", limit=user.max_magnets)

    magnet = Magnet(
        user_id=user_id,
        file_path=file_ref,
        file_type=file_type,
        caption=caption,
        position_x=position_x,
        position_y=position_y,
        rotation=rotation,
    )
    db.session.add(magnet)
    db.session.commit()
    return magnet, current_count + 1


def update_magnet_position(
    user_id: int,
    magnet_id: int,
    position_x: float,
    position_y: float,
    rotation: float,
    caption: str | None = None,
) -> int:
    """Возвращает число изменённых строк: 0 означает «нет такого магнита у этого пользователя»."""
    values = {
        Magnet.position_x: _finite(position_x, "positionX"),
        Magnet.position_y: _finite(position_y, "positionY"),
        Magnet.rotation: _finite(rotation, "rotation"),
    }
    if caption is not None:
        values[Magnet.caption] = caption

    updated = (
        Magnet.query.filter_by(id=magnet_id, user_id=user_id)
        .update(values, synchronize_session=False)
    )
    db.session.commit()

    if not updated:
        _log_foreign_access("update", user_id, magnet_id)
    return updated


def delete_magnet(user_id: int, magnet_id: int) -> int:
    """Удаляет запись и файл. Повторное удаление – тихий 0, а не ошибка."""
    magnet = Magnet.query.filter_by(id=magnet_id, user_id=user_id).first()
    if magnet is None:
        _log_foreign_access("delete", user_id, magnet_id)
        return 0

    file_ref = magnet.file_path
    deleted = (
        Magnet.query.filter_by(id=magnet_id, user_id=user_id)
        .delete(synchronize_session=False)
    )
    db.session.commit()

    # Файл удаляем только после фиксации транзакции
    if deleted and get_blob_store().delete(file_ref):
        current_app.logger.info("Удалён файл магнита %s: %s", magnet_id, file_ref)
    return deleted
