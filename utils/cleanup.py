"""
Модуль: `utils/cleanup.py`.
Назначение: Очистка файлов в хранилище, на которые не ссылается ни магнит, ни письмо.
"""

from datetime import datetime, timedelta

from flask import current_app

from extensions import db
from models.magnet import Magnet
from models.mail_item import MailItem


def cleanup_orphan_uploads(days: int | None = None) -> list[str]:
    """Удаляет «осиротевшие» файлы старше `days` дней и возвращает их ссылки."""
    if days is None:
        days = current_app.config["ORPHAN_UPLOAD_GRACE_DAYS"]
    store = current_app.extensions["blob_store"]
    cutoff = datetime.utcnow() - timedelta(days=days)

    referenced = {row[0] for row in db.session.query(Magnet.file_path).all()}
    referenced.update(
        row[0]
        for row in db.session.query(MailItem.media_path)
        .filter(MailItem.media_path.isnot(None))
        .all()
    )

    removed = []
    for reference in store.references():
        if reference in referenced:
            continue
        if store.modified_at(reference) >= cutoff:
            continue
        if store.delete(reference):
            removed.append(reference)

    if removed:
        current_app.logger.info("Удалено неиспользуемых файлов: %d", len(removed))
    return removed
