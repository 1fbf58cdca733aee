"""
Модуль: `utils/blob_store.py`.
Назначение: Хранилище загруженных файлов с непрозрачными ссылками.

Модели хранят только ссылку (имя файла), а путь на диске и URL для клиента
вычисляет хранилище.
"""

import os
import shutil
import uuid
from datetime import datetime

from flask import current_app
from werkzeug.utils import secure_filename

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
}


class BlobStore:
    """Интерфейс хранилища: put / delete / copy / url_for."""

    def put(self, data: bytes, content_type: str) -> str:
        raise NotImplementedError

    def delete(self, reference: str | None) -> bool:
        raise NotImplementedError

    def copy(self, reference: str) -> str:
        raise NotImplementedError

    def exists(self, reference: str | None) -> bool:
        raise NotImplementedError

    def url_for(self, reference: str | None) -> str | None:
        raise NotImplementedError

    def references(self) -> list[str]:
        raise NotImplementedError

    def modified_at(self, reference: str) -> datetime:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Файлы в одной плоской папке на диске."""

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = root
        self.url_prefix = url_prefix.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    @staticmethod
    def _new_reference(extension: str) -> str:
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        return f"{timestamp}_{uuid.uuid4().hex[:12]}.{extension}"

    def _path(self, reference: str) -> str:
        # Ссылка – только имя файла, без каталогов и "..".
        if not reference or secure_filename(reference) != reference:
            raise ValueError(f"Invalid blob reference: {reference!r}")
        return os.path.join(self.root, reference)

    def put(self, data: bytes, content_type: str) -> str:
        extension = CONTENT_TYPE_EXTENSIONS.get((content_type or "").lower(), "bin")
        reference = self._new_reference(extension)
        with open(self._path(reference), "wb") as f:
            f.write(data)
        return reference

    def delete(self, reference: str | None) -> bool:
        if not reference:
            return False
        try:
            os.remove(self._path(reference))
        except FileNotFoundError:
            return False
        return True

    def copy(self, reference: str) -> str:
        extension = reference.rsplit(".", 1)[1] if "." in reference else "bin"
        new_reference = self._new_reference(extension)
        shutil.copyfile(self._path(reference), self._path(new_reference))
        return new_reference

    def exists(self, reference: str | None) -> bool:
        if not reference:
            return False
        try:
            return os.path.isfile(self._path(reference))
        except ValueError:
            return False

    def url_for(self, reference: str | None) -> str | None:
        if not reference:
            return None
        return f"{self.url_prefix}/{reference}"

    def references(self) -> list[str]:
        return sorted(
            name for name in os.listdir(self.root)
            if os.path.isfile(os.path.join(self.root, name))
        )

    def modified_at(self, reference: str) -> datetime:
        return datetime.utcfromtimestamp(os.path.getmtime(self._path(reference)))


def get_blob_store() -> BlobStore:
    return current_app.extensions["blob_store"]
