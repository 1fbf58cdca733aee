"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: services/mail.py – почта кругов и превращение писем в магниты.

Назначение модуля:
- Отправка письма в круг (только участником круга), вложение необязательно.
- Лента писем из всех кругов пользователя, новые сверху, не более MAIL_LIST_LIMIT.
- Превращение письма с вложением в магнит: копия файла, новый магнит и отметка
  на письме фиксируются одной транзакцией. Отметка конечна, повторное
  превращение отклоняется.
"""

from datetime import datetime

from flask import current_app
from sqlalchemy.orm import joinedload

from extensions import db
from models.circle_member import CircleMember
from models.magnet import Magnet
from models.mail_item import MailItem
from services.circles import get_membership
from utils.blob_store import get_blob_store
from utils.coordinates import random_placement
from utils.errors import AuthorizationError, NotFoundError, ValidationError


def _visible_mail_query(user_id: int):
    return (
        MailItem.query.join(CircleMember, CircleMember.circle_id == MailItem.to_circle_id)
        .filter(CircleMember.user_id == user_id)
    )


def list_mail(user_id: int) -> list[MailItem]:
    limit = current_app.config["MAIL_LIST_LIMIT"]
    return (
        _visible_mail_query(user_id)
        .options(joinedload(MailItem.sender), joinedload(MailItem.circle))
        .order_by(MailItem.created_at.desc(), MailItem.id.desc())
        .limit(limit)
        .all()
    )


def require_membership(user_id: int, circle_id: int | None) -> None:
    """Проверка до любых изменений: отправлять в круг может только участник."""
    if not circle_id:
        raise ValidationError("Circle ID required")

    if get_membership(circle_id, user_id) is None:
        current_app.logger.warning(
            "Пользователь %s пытался отправить письмо в чужой круг %s", user_id, circle_id
        )
        raise AuthorizationError("Not a member of this circle")


def send_mail(
    user_id: int,
    circle_id: int | None,
    subject: str | None = None,
    content: str | None = None,
    media_ref: str | None = None,
    media_type: str | None = None,
) -> MailItem:
    require_membership(user_id, circle_id)

    mail = MailItem(
        from_user_id=user_id,
        to_circle_id=circle_id,
        subject=subject or None,
        content=content or None,
        media_path=media_ref,
        media_type=media_type if media_ref else None,
    )
    db.session.add(mail)
    db.session.commit()
    return mail


def _mail_caption(mail: MailItem) -> str:
    if mail.subject:
        return mail.subject
    if mail.content:
        return mail.content
    sender = mail.sender.username if mail.sender else "unknown"
    return f"Mail from {sender}"


def convert_mail_to_magnet(user_id: int, mail_id: int) -> tuple[Magnet, MailItem]:
    mail = _visible_mail_query(user_id).filter(MailItem.id == mail_id).first()
    if mail is None:
        if db.session.get(MailItem, mail_id) is not None:
            current_app.logger.warning(
                "Пользователь %s пытался превратить в магнит письмо %s чужого круга", user_id, mail_id
            )
        raise NotFoundError("Mail not found or no access")

    if not mail.media_path:
        raise ValidationError("Mail has no media to convert")
    if mail.is_converted_to_magnet:
        raise ValidationError("Mail already converted to a magnet")

    store = get_blob_store()
    if not store.exists(mail.media_path):
        current_app.logger.error("Файл вложения письма %s не найден: %s", mail.id, mail.media_path)
        raise NotFoundError("Mail media is no longer available")

    # Магнит получает собственную копию файла и удаляется независимо от письма
    file_ref = store.copy(mail.media_path)
    position_x, position_y, rotation = random_placement()
    now = datetime.utcnow()

    try:
        flagged = (
            MailItem.query.filter(
                MailItem.id == mail.id,
                MailItem.is_converted_to_magnet.is_(False),
            )
            .update(
                {
                    MailItem.is_converted_to_magnet: True,
                    MailItem.converted_by_user_id: user_id,
                    MailItem.converted_at: now,
                },
                synchronize_session=False,
            )
        )
        if not flagged:
            raise ValidationError("Mail already converted to a magnet")

        magnet = Magnet(
            user_id=user_id,
            file_path=file_ref,
            file_type=mail.media_type or "image",
            caption=_mail_caption(mail),
            position_x=position_x,
            position_y=position_y,
            rotation=rotation,
        )
        db.session.add(magnet)
        db.session.commit()
    except Exception:
        db.session.rollback()
        store.delete(file_ref)
        raise

    db.session.refresh(mail)
    current_app.logger.info(
        "Письмо %s превращено в магнит %s пользователем %s", mail.id, magnet.id, user_id
    )
    return magnet, mail
