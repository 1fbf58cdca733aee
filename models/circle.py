"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: models/circle.py – круг (группа пользователей для обмена почтой).
"""

from datetime import datetime

from extensions import db


class Circle(db.Model):
    """Класс `Circle` описывает именованную группу с создателем-администратором."""
    __tablename__ = "circles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    created_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    creator = db.relationship("User", back_populates="created_circles")
    members = db.relationship(
        "CircleMember",
        back_populates="circle",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    mail_items = db.relationship(
        "MailItem",
        back_populates="circle",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
