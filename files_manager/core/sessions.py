# files_manager/core/sessions.py
"""Redis-backed session tokens."""

import logging
import secrets

import redis

logger = logging.getLogger(__name__)


class SessionStore:
    KEY_PREFIX = "session:"

    def __init__(self, client: redis.Redis, ttl: int):
        self.client = client
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings) -> "SessionStore":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        return cls(client, settings.session_ttl)

    def _key(self, token: str) -> str:
        return f"{self.KEY_PREFIX}{token}"

    def is_alive(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        self.client.setex(self._key(token), self.ttl, str(user_id))
        return token

    def get_user_id(self, token: str | None) -> int | None:
        if not token:
            return None
        value = self.client.get(self._key(token))
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    def delete(self, token: str) -> None:
        self.client.delete(self._key(token))
