"""
Модуль: `utils/media.py`.
Назначение: Проверка загружаемых изображений и видео перед сохранением в хранилище.
"""

from PIL import Image, UnidentifiedImageError
from flask import current_app

from utils.errors import ValidationError

FORMAT_CONTENT_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

VIDEO_CONTENT_TYPES = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
}


def _extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def _validate_image(file_storage) -> str:
    """Проверяет изображение через Pillow и возвращает его content type."""
    cfg = current_app.config
    file_storage.stream.seek(0)
    try:
        with Image.open(file_storage.stream) as image:
            image.verify()
    except (UnidentifiedImageError, OSError):
        raise ValidationError("File is not a valid image")
    finally:
        file_storage.stream.seek(0)

    try:
        with Image.open(file_storage.stream) as image:
            image_format = (image.format or "").lower()
            width, height = image.size
    except (UnidentifiedImageError, OSError):
        raise ValidationError("File is not a valid image")
    finally:
        file_storage.stream.seek(0)

    if image_format not in cfg["ALLOWED_IMAGE_FORMATS"]:
        raise ValidationError("Unsupported image format")

    if width * height > cfg["MAX_IMAGE_PIXELS"]:
        raise ValidationError("Image resolution is too large")

    return FORMAT_CONTENT_TYPES[image_format]


def read_upload(file_storage) -> tuple[bytes, str, str]:
    """Возвращает (данные, content type, вид файла image|video) или бросает ValidationError."""
    if file_storage is None or not file_storage.filename:
        raise ValidationError("No file uploaded")

    extension = _extension(file_storage.filename)
    if extension not in current_app.config["ALLOWED_EXTENSIONS"]:
        raise ValidationError("Only images and videos are allowed")

    mimetype = (file_storage.mimetype or "").lower()
    if mimetype.startswith("video/"):
        content_type = VIDEO_CONTENT_TYPES.get(extension)
        if content_type is None:
            raise ValidationError("Only images and videos are allowed")
        file_kind = "video"
    elif mimetype.startswith("image/"):
        content_type = _validate_image(file_storage)
        file_kind = "image"
    else:
        raise ValidationError("Only images and videos are allowed")

    data = file_storage.read()
    if not data:
        raise ValidationError("Uploaded file is empty")
    return data, content_type, file_kind
