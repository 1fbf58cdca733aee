"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: models/mail_item.py – письмо, отправленное в круг.

Жизненный цикл: создано -> (опционально) превращено в магнит. Второе состояние конечное.
"""

from datetime import datetime

from extensions import db


class MailItem(db.Model):
    """Класс `MailItem` описывает письмо с текстом и необязательным вложением."""
    __tablename__ = "mail_items"

    id = db.Column(db.Integer, primary_key=True)
    from_user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    to_circle_id = db.Column(
        db.Integer,
        db.ForeignKey("circles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject = db.Column(db.String(200))
    content = db.Column(db.Text)
    media_path = db.Column(db.String(255))
    media_type = db.Column(db.String(10))
    is_converted_to_magnet = db.Column(db.Boolean, nullable=False, default=False)
    converted_by_user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    converted_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    sender = db.relationship("User", foreign_keys=[from_user_id], back_populates="sent_mail")
    circle = db.relationship("Circle", back_populates="mail_items")

    def to_dict(self, media_url: str | None = None) -> dict:
        return {
            "id": self.id,
            "from_user_id": self.from_user_id,
            "from_username": self.sender.username if self.sender else None,
            "to_circle_id": self.to_circle_id,
            "circle_name": self.circle.name if self.circle else None,
            "subject": self.subject,
            "content": self.content,
            "media_path": self.media_path,
            "media_type": self.media_type,
            "media_url": media_url,
            "is_converted_to_magnet": bool(self.is_converted_to_magnet),
            "converted_by_user_id": self.converted_by_user_id,
            "converted_at": self.converted_at.isoformat() if self.converted_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
