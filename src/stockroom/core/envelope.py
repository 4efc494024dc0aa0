"""Response envelope.

Every handler answers through respond(): an Envelope carries the status,
payload, output mode and extra headers, and is written to the request's
ResponseHandle exactly once.
"""

import json
import logging
from collections.abc import AsyncIterable, Awaitable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from bson import ObjectId
from fastapi import status
from fastapi.encoders import jsonable_encoder
from starlette.responses import Response, StreamingResponse

from stockroom.errors import ApiError, UsageError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json; charset=utf-8"
HTML_MEDIA_TYPE = "text/html; charset=utf-8"

# Statuses that must not carry a body
_BODYLESS = frozenset({status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED})


class ResponseType(Enum):
    """Output mode of an envelope."""

    JSON = "json"
    HTML = "html"
    RAW = "raw"
    STREAM = "stream"


class ResponseHandle:
    """Per-request transport handle; holds the one response written for the request."""

    def __init__(self) -> None:
        self._response: Response | None = None

    def write(self, response: Response) -> None:
        """Attach the final response.

        Raises:
            UsageError: If a response was already written for this request.
        """
        if self._response is not None:
            raise UsageError("A response was already written for this request")
        self._response = response

    @property
    def sent(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> Response | None:
        return self._response


@dataclass
class Envelope:
    """Status, payload and headers of one response.

    Attributes:
        response: Handle the envelope is written to.
        status: HTTP status code. Defaults to 200.
        data: Payload. Defaults to an empty object.
        stream: Body iterator, required for STREAM.
        type: Output mode. Defaults to JSON.
        headers: Extra headers, required (possibly empty) for RAW.
    """

    response: ResponseHandle
    status: int = status.HTTP_200_OK
    data: Any = None
    stream: AsyncIterable[Any] | Iterable[Any] | None = None
    type: ResponseType = ResponseType.JSON
    headers: dict[str, str] | None = None

    @classmethod
    def from_exception(cls, response: ResponseHandle, error: BaseException) -> "Envelope":
        """Build the error envelope for an exception.

        ApiError keeps its own status; anything else is reported as 500.
        """
        if isinstance(error, ApiError):
            return cls(response=response, status=error.status_code, data=error.message)
        return cls(response=response, status=status.HTTP_500_INTERNAL_SERVER_ERROR, data=str(error))


def to_jsonable(data: Any) -> Any:
    """Convert a payload into plain JSON types (ObjectIds and datetimes included)."""
    if isinstance(data, dict):
        data = {key: value for key, value in data.items() if not callable(value)}
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


def respond(envelope: Envelope) -> None:
    """Serialize an envelope and write it to its response handle.

    Raises:
        UsageError: RAW without headers, STREAM without a stream, or a second
            response for the same request.
    """
    data = {} if envelope.data is None else envelope.data
    headers = dict(envelope.headers or {})
    code = envelope.status

    if envelope.type is ResponseType.JSON:
        body = b"" if code in _BODYLESS else json.dumps(to_jsonable(data)).encode("utf-8")
        response: Response = Response(content=body, status_code=code, headers=headers, media_type=JSON_MEDIA_TYPE)

    elif envelope.type is ResponseType.HTML:
        body = b"" if code in _BODYLESS else str(data).encode("utf-8")
        response = Response(content=body, status_code=code, headers=headers, media_type=HTML_MEDIA_TYPE)

    elif envelope.type is ResponseType.RAW:
        if envelope.headers is None:
            raise UsageError("ResponseType.RAW requires headers to be set")
        if not isinstance(data, (str, bytes)):
            raise UsageError(f"ResponseType.RAW requires str or bytes data, got {type(data).__name__}")
        response = Response(content=data, status_code=code, headers=headers)

    elif envelope.type is ResponseType.STREAM:
        if envelope.stream is None:
            raise UsageError("ResponseType.STREAM requires a stream to be set")
        response = StreamingResponse(envelope.stream, status_code=code, headers=headers)

    else:
        raise UsageError(f"Unknown response type: {envelope.type!r}")

    envelope.response.write(response)


async def respond_async(response: ResponseHandle, producer: Awaitable[Envelope]) -> None:
    """Wait for a single envelope and write it; a failure is written as an error envelope."""
    try:
        envelope = await producer
    except Exception as e:
        logger.warning("Deferred response failed: %s", e)
        envelope = Envelope.from_exception(response, e)
    respond(envelope)
