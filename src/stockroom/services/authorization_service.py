"""Session based authentication.

A login issues an opaque token stored in the session store under the user's
id, so every user has at most one live session. Authenticated requests carry
the pair in two headers:

    auth-id:    the user id
    auth-token: the session token
"""

import hmac
import logging
import secrets

from fastapi import Request

from stockroom.config import settings
from stockroom.entities import AuthToken
from stockroom.protocols import Document, SessionStore
from stockroom.services.user_service import UserService
from stockroom.utils import verify_password

logger = logging.getLogger(__name__)

AUTH_ID_HEADER = "auth-id"
AUTH_TOKEN_HEADER = "auth-token"


class AuthorizationService:
    """Issues, checks and revokes sessions.

    Args:
        user_service: Access to user documents and their credentials.
        session_store: Storage for live session tokens.
        session_ttl: Session lifetime in seconds, 0 or None for no expiry.
    """

    def __init__(
        self,
        user_service: UserService,
        session_store: SessionStore,
        session_ttl: int | None = settings.session_ttl,
    ) -> None:
        self._users = user_service
        self._sessions = session_store
        self._ttl = session_ttl or None

    async def authorize_user_and_password(self, username: str, password: str) -> AuthToken | None:
        """Check credentials and open a new session.

        Any previous session of the same user is cancelled.

        Returns:
            The new AuthToken, None if the credentials are wrong
        """
        user = await self._users.find_one({"name": username}, skip_sanitization=True)
        if not user or user.get("deleted"):
            logger.info("Login failed for unknown user %r", username)
            return None

        if not verify_password(password, user.get("salt", ""), user.get("password", "")):
            logger.info("Login failed for user %r", username)
            return None

        user_id = user["id"]
        await self._sessions.delete(user_id)

        token = AuthToken(auth_id=user_id, auth_token=secrets.token_hex(32))
        await self._sessions.set(user_id, token.auth_token, ttl=self._ttl)
        logger.info("User %r logged in", username)
        return token

    async def authorized(self, request: Request) -> bool:
        """Check the session headers of a request.

        On success the sanitized user document is attached as request.state.user.
        """
        user = await self._session_user(request)
        if user is None:
            return False
        request.state.user = self._users.sanitize(user)
        return True

    async def logout(self, request: Request) -> bool:
        """Revoke the session the request is authenticated with.

        Returns:
            True if a session was revoked
        """
        user = await self._session_user(request)
        if user is None:
            return False
        return await self._sessions.delete(user["id"])

    async def _session_user(self, request: Request) -> Document | None:
        auth_id = request.headers.get(AUTH_ID_HEADER)
        auth_token = request.headers.get(AUTH_TOKEN_HEADER)
        if not auth_id or not auth_token:
            return None

        stored = await self._sessions.get(auth_id)
        if stored is None or not hmac.compare_digest(stored, auth_token):
            return None

        return await self._users.get_by_id(auth_id, skip_sanitization=True)
