"""Liveness of the API and its backing stores."""

from fastapi import Request, status

from stockroom.core import BaseController, Envelope, Middleware, ResponseHandle, respond
from stockroom.core.routing import ControllerRoutes
from stockroom.dto import HealthCheckResponse
from stockroom.protocols import DocumentStore, SessionStore


class HealthController(BaseController):
    prefix = "/health"
    middlewares = (Middleware.NO_AUTH,)

    def __init__(self, document_store: DocumentStore, session_store: SessionStore) -> None:
        self._documents = document_store
        self._sessions = session_store

    @classmethod
    def declare_routes(cls, routes: ControllerRoutes) -> None:
        routes.get("health")

    async def health(self, request: Request, response: ResponseHandle) -> None:
        """Handle GET /health/ requests.

        Answers 200 when both stores respond, 503 otherwise.
        """
        document_store = await self._documents.health_check()
        session_store = await self._sessions.health_check()
        healthy = document_store and session_store

        body = HealthCheckResponse(
            status="healthy" if healthy else "unhealthy",
            document_store=document_store,
            session_store=session_store,
        )
        respond(
            Envelope(
                response=response,
                status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
                data=body.model_dump(),
            )
        )
