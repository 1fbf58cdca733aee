"""
Модуль: `utils/session_store.py`.
Назначение: Хранилище сессионных токенов (токен -> id пользователя).

Реализация в памяти теряет все сессии при перезапуске процесса; для
нескольких воркеров нужен разделяемый бэкенд с тем же интерфейсом.
"""

import secrets
import time
from threading import Lock


class SessionStore:
    """Интерфейс хранилища сессий."""

    def get(self, token: str | None) -> int | None:
        raise NotImplementedError

    def put(self, token: str, user_id: int) -> None:
        raise NotImplementedError

    def invalidate(self, token: str | None) -> bool:
        raise NotImplementedError

    def issue(self, user_id: int) -> str:
        """Создаёт непредсказуемый токен и сохраняет его."""
        token = secrets.token_urlsafe(32)
        self.put(token, user_id)
        return token


class InMemorySessionStore(SessionStore):
    """Потокобезопасный словарь сессий с необязательным TTL."""

    def __init__(self, ttl_seconds: int | None = None, clock=time.monotonic):
        self._ttl = ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        self._clock = clock
        self._sessions: dict[str, tuple[int, float | None]] = {}
        self._lock = Lock()

    def get(self, token: str | None) -> int | None:
        if not token:
            return None

        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None

            user_id, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._sessions[token]
                return None
            return user_id

    def put(self, token: str, user_id: int) -> None:
        now = self._clock()
        expires_at = now + self._ttl if self._ttl else None
        with self._lock:
            if self._ttl:
                self._purge_expired(now)
            self._sessions[token] = (user_id, expires_at)

    def _purge_expired(self, now: float) -> None:
        """Удаляет брошенные клиентами токены; вызывается под блокировкой."""
        expired = [
            token for token, (_, expires_at) in self._sessions.items()
            if expires_at is not None and expires_at <= now
        ]
        for token in expired:
            del self._sessions[token]

    def invalidate(self, token: str | None) -> bool:
        if not token:
            return False
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
