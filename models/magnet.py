"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: models/magnet.py – модель магнита на дверце.

Позиция хранится в нормализованных координатах, поворот – в градусах.
"""

from datetime import datetime

from extensions import db


class Magnet(db.Model):
    """Класс `Magnet` описывает фото или видео, прикреплённое к дверце."""
    __tablename__ = "magnets"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_path = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(10), nullable=False, default="image")  # image | video
    caption = db.Column(db.String(255))
    position_x = db.Column(db.Float, nullable=False, default=0.0)
    position_y = db.Column(db.Float, nullable=False, default=0.0)
    rotation = db.Column(db.Float, nullable=False, default=0.0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    owner = db.relationship("User", back_populates="magnets")

    def to_dict(self, url: str | None = None) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "file_path": self.file_path,
            "file_type": self.file_type,
            "caption": self.caption,
            "position_x": self.position_x,
            "position_y": self.position_y,
            "rotation": self.rotation,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "url": url,
        }
