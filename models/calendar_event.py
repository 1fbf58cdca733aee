"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: models/calendar_event.py – событие календаря (обратный отсчёт).
"""

from datetime import datetime

from extensions import db


class CalendarEvent(db.Model):
    """Класс `CalendarEvent` описывает дату, до которой ведётся обратный отсчёт."""
    __tablename__ = "calendar_events"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    owner = db.relationship("User", back_populates="calendar_events")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "date": self.date.isoformat(),
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
