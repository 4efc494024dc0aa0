"""Login and logout."""

from fastapi import Request, status
from pydantic import ValidationError

from stockroom.core import BaseController, Envelope, Middleware, ResponseHandle, respond
from stockroom.core.routing import ControllerRoutes
from stockroom.dto import LoginRequest
from stockroom.errors import ApiError
from stockroom.services import AuthorizationService, UserService


class AuthController(BaseController):
    """Session endpoints, open to unauthenticated clients.

    Example:
        ```
        POST /auth/    {"username": "admin", "password": "admin"}
        -> the user document with a "token" {"auth_id": ..., "auth_token": ...}

        DELETE /auth/  (auth-id / auth-token headers)
        -> true when a session was revoked
        ```
    """

    prefix = "/auth"
    middlewares = (Middleware.NO_AUTH,)

    def __init__(self, user_service: UserService, authorization_service: AuthorizationService) -> None:
        self._users = user_service
        self._auth = authorization_service

    @classmethod
    def declare_routes(cls, routes: ControllerRoutes) -> None:
        routes.post("login").delete("logout")

    async def login(self, request: Request, response: ResponseHandle) -> None:
        try:
            body = await self.read_json(request)
            credentials = LoginRequest.model_validate(body if isinstance(body, dict) else {})
        except (ApiError, ValidationError):
            respond(
                Envelope(
                    response=response,
                    status=status.HTTP_401_UNAUTHORIZED,
                    data="MISSING_USERNAME_OR_PASSWORD",
                )
            )
            return

        token = await self._auth.authorize_user_and_password(credentials.username, credentials.password)
        if token is None:
            respond(
                Envelope(
                    response=response,
                    status=status.HTTP_401_UNAUTHORIZED,
                    data={"error": "UNKNOWN_USERNAME_OR_PASSWORD", "username": credentials.username},
                )
            )
            return

        user = await self._users.get_by_id(token.auth_id)
        respond(Envelope(response=response, data={**user, "token": token}))

    async def logout(self, request: Request, response: ResponseHandle) -> None:
        respond(Envelope(response=response, data=await self._auth.logout(request)))
