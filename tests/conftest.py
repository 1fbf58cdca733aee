import io
import os
import tempfile

# Модуль app создаёт приложение при импорте, поэтому окружение задаётся заранее
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_FOLDER", tempfile.mkdtemp(prefix="fridge-uploads-"))

import pytest
from PIL import Image

from app import create_app
from extensions import db


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        }
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload_dir(app):
    return app.config["UPLOAD_FOLDER"]


def png_bytes(color=(255, 0, 0), size=(4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def register(client, username, pin="1234"):
    response = client.post("/api/register", json={"username": username, "pin": pin})
    assert response.status_code == 200, response.get_json()
    return response.get_json()


def login(client, username, pin="1234") -> dict:
    response = client.post("/api/login", json={"username": username, "pin": pin})
    assert response.status_code == 200, response.get_json()
    return {"X-Session-Id": response.get_json()["sessionId"]}


@pytest.fixture
def signup(client):
    """Регистрирует пользователя и возвращает заголовки с его сессией."""

    def _signup(username, pin="1234"):
        register(client, username, pin)
        return login(client, username, pin)

    return _signup


def upload_magnet(client, headers, filename="photo.png", data=None, **form):
    payload = {"file": (io.BytesIO(data if data is not None else png_bytes()), filename, "image/png")}
    payload.update({key: str(value) for key, value in form.items()})
    return client.post(
        "/api/magnets",
        headers=headers,
        data=payload,
        content_type="multipart/form-data",
    )
