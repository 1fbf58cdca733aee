"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: services/circles.py – круги и членство в них.

Назначение модуля:
- Создание круга вместе с членством создателя-администратора (одна транзакция).
- Приглашение участников только администратором круга.
- Просмотр состава круга только его участниками.
"""

from flask import current_app
from sqlalchemy import exists, func, or_, select
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.circle import Circle
from models.circle_member import CircleMember, ROLE_ADMIN, ROLE_MEMBER
from models.user import User
from utils.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError


def get_membership(circle_id: int, user_id: int) -> CircleMember | None:
    return CircleMember.query.filter_by(circle_id=circle_id, user_id=user_id).first()


def list_circles(user_id: int) -> list[dict]:
    """Круги, где пользователь участник или создатель, с числом участников."""
    member_count = (
        select(func.count(CircleMember.id))
        .where(CircleMember.circle_id == Circle.id)
        .correlate(Circle)
        .scalar_subquery()
    )
    is_member = exists().where(
        CircleMember.circle_id == Circle.id,
        CircleMember.user_id == user_id,
    )
    rows = (
        db.session.query(Circle, member_count.label("member_count"))
        .filter(or_(is_member, Circle.created_by == user_id))
        .order_by(Circle.created_at.desc(), Circle.id.desc())
        .all()
    )

    circles = []
    for circle, count in rows:
        data = circle.to_dict()
        data["member_count"] = count
        circles.append(data)
    return circles


def create_circle(user_id: int, name: str | None, description: str | None = None) -> Circle:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Circle name required")

    circle = Circle(name=name, description=description, created_by=user_id)
    circle.members.append(CircleMember(user_id=user_id, role=ROLE_ADMIN))
    db.session.add(circle)
    try:
        db.session.commit()
    except Exception:
        # Круг без администратора не должен остаться в базе
        db.session.rollback()
        raise

    current_app.logger.info("Пользователь %s создал круг %s (id=%s)", user_id, name, circle.id)
    return circle


def list_members(user_id: int, circle_id: int) -> list[CircleMember]:
    if get_membership(circle_id, user_id) is None:
        current_app.logger.warning(
            "Пользователь %s запросил состав круга %s, не будучи участником", user_id, circle_id
        )
        raise AuthorizationError("Not a member of this circle")

    return (
        CircleMember.query.filter_by(circle_id=circle_id)
        .order_by(CircleMember.joined_at.asc(), CircleMember.id.asc())
        .all()
    )


def invite_member(requester_id: int, circle_id: int, username: str | None) -> CircleMember:
    """Добавляет пользователя в круг с ролью member."""
    # Права проверяются до поиска приглашаемого пользователя
    membership = get_membership(circle_id, requester_id)
    if membership is None or not membership.is_admin:
        current_app.logger.warning(
            "Пользователь %s без прав администратора пытался пригласить в круг %s", requester_id, circle_id
        )
        raise AuthorizationError("Only admins can invite members")

    username = (username or "").strip()
    user = User.query.filter_by(username=username).first() if username else None
    if user is None:
        raise NotFoundError("User not found")

    if get_membership(circle_id, user.id) is not None:
        raise ConflictError("User already in circle")

    member = CircleMember(circle_id=circle_id, user_id=user.id, role=ROLE_MEMBER)
    db.session.add(member)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("User already in circle")

    current_app.logger.info("Пользователь %s добавлен в круг %s", user.id, circle_id)
    return member
