"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: models/user.py – модель пользователя системы.

Назначение модуля:
- Описание ORM-модели User (логин, хеш PIN-кода, лимиты и настройки холодильника).
- Связи с магнитами, событиями календаря, кругами, членством и отправленной
  почтой с каскадным удалением.
"""

from datetime import datetime

from flask_login import UserMixin
from extensions import db


class User(UserMixin, db.Model):
    """Класс `User` описывает владельца холодильника."""
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    pin_hash = db.Column(db.String(200), nullable=False)
    max_magnets = db.Column(db.Integer, nullable=False, default=2)
    max_calendar_events = db.Column(db.Integer, nullable=False, default=1)
    fridge_color = db.Column(db.String(7), nullable=False, default="#A3D8F4")
    handle_position = db.Column(db.String(10), nullable=False, default="right")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    magnets = db.relationship(
        "Magnet",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    calendar_events = db.relationship(
        "CalendarEvent",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    memberships = db.relationship(
        "CircleMember",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    created_circles = db.relationship(
        "Circle",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    # У письма два FK на пользователя, каскад идёт только по отправителю
    sent_mail = db.relationship(
        "MailItem",
        back_populates="sender",
        foreign_keys="MailItem.from_user_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
