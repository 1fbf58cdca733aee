"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: models/circle_member.py – членство пользователя в круге.
"""

from datetime import datetime

from extensions import db

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


class CircleMember(db.Model):
    """Класс `CircleMember` связывает круг и пользователя с ролью admin или member."""
    __tablename__ = "circle_members"
    __table_args__ = (db.UniqueConstraint("circle_id", "user_id", name="uq_circle_member"),)

    id = db.Column(db.Integer, primary_key=True)
    circle_id = db.Column(
        db.Integer,
        db.ForeignKey("circles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = db.Column(db.String(10), nullable=False, default=ROLE_MEMBER)
    joined_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    circle = db.relationship("Circle", back_populates="members")
    user = db.relationship("User", back_populates="memberships")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "circle_id": self.circle_id,
            "user_id": self.user_id,
            "username": self.user.username if self.user else None,
            "role": self.role,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
        }
