# interfaces/session_store.py
"""
Session State Management for the chat endpoint
Keeps one BookingContext per conversation between HTTP turns
"""

import uuid
from datetime import datetime
from typing import Optional, Dict
import redis
from loguru import logger

from ..config import settings
from ..schemas.ai_schemas import BookingContext


class SessionStore:
    """
    BookingContext per session id.
    Redis when reachable, otherwise an in-process dict.
    """

    def __init__(
        self,
        redis_host: str = settings.REDIS_HOST,
        redis_port: int = settings.REDIS_PORT,
        redis_db: int = settings.REDIS_DB,
        ttl_hours: int = settings.SESSION_TTL_HOURS,
        use_redis: bool = True,
    ):
        self.ttl_seconds = ttl_hours * 3600
        self.redis_client = None
        self._memory_store: Dict[str, str] = {}

        if use_redis:
            try:
                self.redis_client = redis.Redis(
                    host=redis_host,
                    port=redis_port,
                    db=redis_db,
                    decode_responses=True,
                    socket_connect_timeout=1,
                )
                self.redis_client.ping()
                logger.info(f"SessionStore connected to Redis at {redis_host}:{redis_port}")
            except redis.RedisError as e:
                logger.warning(f"Redis connection failed, using in-memory store: {e}")
                self.redis_client = None

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client else "memory"

    def _get_key(self, session_id: str) -> str:
        return f"transfer_session:{session_id}"

    def create_session(self, session_id: Optional[str] = None) -> str:
        """Create a session holding an empty context"""
        if not session_id:
            session_id = f"sess_{datetime.utcnow():%Y%m%d}_{uuid.uuid4().hex[:8]}"

        self.save_context(session_id, BookingContext())
        logger.info(f"Created new session: {session_id}")
        return session_id

    def get_context(self, session_id: str) -> Optional[BookingContext]:
        """Stored context, or None for an unknown session"""
        key = self._get_key(session_id)
        raw = None

        if self.redis_client:
            try:
                raw = self.redis_client.get(key)
            except redis.RedisError as e:
                logger.error(f"Redis get error: {e}")

        if raw is None:
            raw = self._memory_store.get(session_id)
        if raw is None:
            return None

        return BookingContext.model_validate_json(raw)

    def save_context(self, session_id: str, context: BookingContext):
        """Persist the context after a turn"""
        raw = context.model_dump_json()

        if self.redis_client:
            try:
                self.redis_client.setex(self._get_key(session_id), self.ttl_seconds, raw)
                return
            except redis.RedisError as e:
                logger.error(f"Redis save error: {e}")

        self._memory_store[session_id] = raw

    def delete_session(self, session_id: str) -> bool:
        """Delete a session; True if it existed"""
        existed = False

        if self.redis_client:
            try:
                existed = bool(self.redis_client.delete(self._get_key(session_id)))
            except redis.RedisError as e:
                logger.error(f"Redis delete error: {e}")

        if session_id in self._memory_store:
            del self._memory_store[session_id]
            existed = True

        logger.info(f"Deleted session: {session_id}")
        return existed

    def get_or_create_session(self, session_id: Optional[str] = None) -> str:
        """Get existing session or create new one"""
        if session_id and self.get_context(session_id) is not None:
            return session_id
        return self.create_session(session_id)


# Global instance
session_store = SessionStore()
