"""
Модуль: `models/__init__.py`.
Назначение: Импорт моделей для корректной регистрации в SQLAlchemy metadata.
"""

from .user import User
from .magnet import Magnet
from .calendar_event import CalendarEvent
from .circle import Circle
from .circle_member import CircleMember
from .mail_item import MailItem

# Предел INTEGER в SQLite; большие идентификаторы не могут существовать
MAX_ROW_ID = 2**63 - 1

__all__ = ["MAX_ROW_ID", "User", "Magnet", "CalendarEvent", "Circle", "CircleMember", "MailItem"]
