import os
import time
from datetime import datetime

import pytest

from extensions import db
from models.magnet import Magnet
from models.user import User
from utils.blob_store import LocalBlobStore
from utils.cleanup import cleanup_orphan_uploads
from utils.rate_limit import InMemoryRateLimiter
from utils.session_store import InMemorySessionStore


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_session_store_issues_unique_tokens():
    store = InMemorySessionStore()

    first = store.issue(1)
    second = store.issue(1)

    assert first != second
    assert store.get(first) == 1
    assert store.get(second) == 1
    assert len(store) == 2


def test_session_store_invalidate():
    store = InMemorySessionStore()
    token = store.issue(7)

    assert store.invalidate(token) is True
    assert store.invalidate(token) is False
    assert store.get(token) is None
    assert store.get(None) is None


def test_session_store_expires_tokens():
    clock = FakeClock()
    store = InMemorySessionStore(ttl_seconds=60, clock=clock)
    token = store.issue(3)

    clock.now += 59
    assert store.get(token) == 3

    clock.now += 1
    assert store.get(token) is None
    assert len(store) == 0


def test_rate_limiter_sliding_window():
    clock = FakeClock()
    limiter = InMemoryRateLimiter(clock=clock)

    assert all(limiter.is_allowed("login:alice", 3, 60) for _ in range(3))
    assert limiter.is_allowed("login:alice", 3, 60) is False
    assert limiter.is_allowed("login:bob", 3, 60) is True

    clock.now += 61
    assert limiter.is_allowed("login:alice", 3, 60) is True


def test_blob_store_put_copy_delete(tmp_path):
    store = LocalBlobStore(str(tmp_path), url_prefix="/uploads/")

    reference = store.put(b"image-bytes", "image/png")
    copy = store.copy(reference)

    assert reference.endswith(".png")
    assert copy != reference and copy.endswith(".png")
    assert (tmp_path / copy).read_bytes() == b"image-bytes"
    assert store.url_for(reference) == f"/uploads/{reference}"
    assert store.references() == sorted([reference, copy])

    assert store.delete(reference) is True
    assert store.delete(reference) is False
    assert store.exists(copy)
    assert not store.exists(reference)


def test_blob_store_rejects_path_traversal(tmp_path):
    store = LocalBlobStore(str(tmp_path))

    with pytest.raises(ValueError):
        store.delete("../secret.txt")
    assert store.exists("../secret.txt") is False
    assert store.url_for(None) is None


def _age(path, days):
    old = time.time() - days * 24 * 60 * 60
    os.utime(path, (old, old))


def test_cleanup_removes_only_old_orphans(app):
    store = app.extensions["blob_store"]
    root = app.config["UPLOAD_FOLDER"]

    with app.app_context():
        user = User(username="alice", pin_hash="x")
        db.session.add(user)
        db.session.commit()

        kept = store.put(b"kept", "image/png")
        orphan = store.put(b"orphan", "image/png")
        fresh_orphan = store.put(b"fresh", "image/png")
        db.session.add(Magnet(user_id=user.id, file_path=kept, caption="kept", created_at=datetime.utcnow()))
        db.session.commit()

        _age(os.path.join(root, kept), 3)
        _age(os.path.join(root, orphan), 3)

        removed = cleanup_orphan_uploads()

    assert removed == [orphan]
    assert store.exists(kept)
    assert store.exists(fresh_orphan)
    assert not store.exists(orphan)


def test_session_store_drops_abandoned_tokens_on_issue():
    clock = FakeClock()
    store = InMemorySessionStore(ttl_seconds=60, clock=clock)
    for user_id in range(1000):
        store.issue(user_id)

    clock.now += 10_000
    token = store.issue(1)

    assert len(store) == 1
    assert store.get(token) == 1


def test_session_store_without_ttl_keeps_tokens():
    clock = FakeClock()
    store = InMemorySessionStore(clock=clock)
    first = store.issue(1)

    clock.now += 10_000
    store.issue(2)

    assert store.get(first) == 1
    assert len(store) == 2
