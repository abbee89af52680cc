"""
Organiser sessions kept in Redis.

The browser only ever holds a signed token naming an opaque session id;
the session itself lives under ``session:<sid>`` with a TTL.
"""

import logging
import secrets
from datetime import timedelta
from typing import Any, Optional

from pydantic import ValidationError

from ..schemas.organiser import Organiser, OrganiserSession
from . import security

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:"


class SessionStore:
    def __init__(
        self,
        redis_client: Any,
        secret: str,
        ttl_seconds: int,
        algorithm: str = security.ALGORITHM,
    ) -> None:
        self.redis = redis_client
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_KEY_PREFIX}{session_id}"

    async def create(self, organiser: Organiser) -> str:
        """Start a session for the organiser and return its token"""
        session_id = secrets.token_urlsafe(32)
        session = OrganiserSession(
            organiser_id=organiser.organiser_id,
            organiser_name=organiser.name,
        )
        await self.redis.set(
            self._key(session_id), session.model_dump_json(), ex=self.ttl_seconds
        )
        return security.create_session_token(
            session_id,
            self.secret,
            timedelta(seconds=self.ttl_seconds),
            algorithm=self.algorithm,
        )

    async def get(self, token: Optional[str]) -> Optional[OrganiserSession]:
        if not token:
            return None
        session_id = security.decode_session_token(
            token, self.secret, algorithm=self.algorithm
        )
        if session_id is None:
            return None
        raw = await self.redis.get(self._key(session_id))
        if raw is None:
            return None
        try:
            return OrganiserSession.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable session %s", session_id)
            await self.redis.delete(self._key(session_id))
            return None

    async def destroy(self, token: Optional[str]) -> None:
        """Remove the session behind a token; unknown tokens are ignored"""
        if not token:
            return
        session_id = security.decode_session_token(
            token, self.secret, algorithm=self.algorithm
        )
        if session_id is not None:
            await self.redis.delete(self._key(session_id))
