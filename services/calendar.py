"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: services/calendar.py – события обратного отсчёта.

Один активный отсчёт на пользователя – правило приложения, а не ограничение
хранилища. Создание упирается в `max_calendar_events`, а замена удаляет
прежние события и добавляет новое одной транзакцией.
"""

from datetime import date, datetime

from extensions import db
from models.calendar_event import CalendarEvent
from models.user import User
from utils.errors import NotFoundError, ValidationError


def _parse_date(raw_value) -> date:
    if isinstance(raw_value, date):
        return raw_value
    try:
        return datetime.strptime((raw_value or "").strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError("Date must be in YYYY-MM-DD format")


def _build_event(user_id: int, title: str | None, raw_date, description: str | None) -> CalendarEvent:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Event title required")
    return CalendarEvent(
        user_id=user_id,
        title=title,
        date=_parse_date(raw_date),
        description=description,
    )


def list_events(user_id: int) -> list[CalendarEvent]:
    return (
        CalendarEvent.query.filter_by(user_id=user_id)
        .order_by(CalendarEvent.date.asc(), CalendarEvent.id.asc())
        .all()
    )


def create_event(user_id: int, title: str | None, raw_date, description: str | None = None) -> CalendarEvent:
    event = _build_event(user_id, title, raw_date, description)

    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    current_count = CalendarEvent.query.filter_by(user_id=user_id).count()
    if current_count >= user.max_calendar_events:
        raise ValidationError(
            "Maximum %(limit)s calendar event allowed",
            limit=user.max_calendar_events,
        )

    db.session.add(event)
    db.session.commit()
    return event


def replace_active_countdown(
    user_id: int,
    title: str | None,
    raw_date,
    description: str | None = None,
) -> CalendarEvent:
    """Заменяет все события пользователя одним новым."""
    event = _build_event(user_id, title, raw_date, description)

    try:
        CalendarEvent.query.filter_by(user_id=user_id).delete(synchronize_session=False)
        db.session.add(event)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return event


def delete_event(user_id: int, event_id: int) -> int:
    deleted = (
        CalendarEvent.query.filter_by(id=event_id, user_id=user_id)
        .delete(synchronize_session=False)
    )
    db.session.commit()
    return deleted
