"""
Tests for the response envelope.
"""

import json

import pytest
from bson import ObjectId
from starlette.responses import StreamingResponse

from stockroom.core import Envelope, ResponseHandle, ResponseType, respond, respond_async
from stockroom.core.envelope import to_jsonable
from stockroom.errors import NotFoundError, UsageError


@pytest.fixture
def handle():
    return ResponseHandle()


def test_json_defaults(handle):
    respond(Envelope(response=handle))

    assert handle.sent
    assert handle.response.status_code == 200
    assert handle.response.headers["content-type"] == "application/json; charset=utf-8"
    assert json.loads(handle.response.body) == {}


def test_json_with_status_and_headers(handle):
    respond(Envelope(response=handle, status=201, data=[1, 2], headers={"X-Cache-Checksum": "abc"}))

    assert handle.response.status_code == 201
    assert handle.response.headers["X-Cache-Checksum"] == "abc"
    assert json.loads(handle.response.body) == [1, 2]


def test_not_modified_has_no_body(handle):
    respond(Envelope(response=handle, status=304, data={"ignored": True}))
    assert handle.response.body == b""


def test_html(handle):
    respond(Envelope(response=handle, data="<p>hi</p>", type=ResponseType.HTML))
    assert handle.response.headers["content-type"].startswith("text/html")
    assert handle.response.body == b"<p>hi</p>"


def test_raw_requires_headers(handle):
    with pytest.raises(UsageError):
        respond(Envelope(response=handle, data="x", type=ResponseType.RAW))
    assert not handle.sent


def test_raw(handle):
    respond(Envelope(response=handle, data=b"\x00\x01", type=ResponseType.RAW, headers={"Content-Type": "application/octet-stream"}))
    assert handle.response.body == b"\x00\x01"


def test_stream_requires_stream(handle):
    with pytest.raises(UsageError):
        respond(Envelope(response=handle, type=ResponseType.STREAM))


@pytest.mark.asyncio
async def test_stream(handle):
    async def rows():
        yield b"name,quantity\n"
        yield b"Rope,2\n"

    respond(
        Envelope(
            response=handle,
            type=ResponseType.STREAM,
            stream=rows(),
            headers={"Content-Type": "text/csv", "X-Cache-Checksum": "abc"},
        )
    )

    assert isinstance(handle.response, StreamingResponse)
    assert handle.response.status_code == 200
    assert handle.response.headers["content-type"] == "text/csv"
    assert handle.response.headers["X-Cache-Checksum"] == "abc"

    chunks = [chunk async for chunk in handle.response.body_iterator]
    assert b"".join(chunks) == b"name,quantity\nRope,2\n"


def test_second_write_is_rejected(handle):
    respond(Envelope(response=handle, data="first"))
    with pytest.raises(UsageError):
        respond(Envelope(response=handle, data="second"))
    assert json.loads(handle.response.body) == "first"


def test_from_exception(handle):
    envelope = Envelope.from_exception(handle, NotFoundError("gone"))
    assert (envelope.status, envelope.data) == (404, "gone")

    envelope = Envelope.from_exception(handle, RuntimeError("boom"))
    assert (envelope.status, envelope.data) == (500, "boom")


def test_to_jsonable_converts_object_ids_and_drops_callables():
    oid = ObjectId()
    assert to_jsonable({"id": oid, "hook": lambda: None}) == {"id": str(oid)}


@pytest.mark.asyncio
async def test_respond_async(handle):
    async def produce():
        return Envelope(response=handle, data={"ok": True})

    await respond_async(handle, produce())
    assert json.loads(handle.response.body) == {"ok": True}


@pytest.mark.asyncio
async def test_respond_async_failure(handle):
    async def produce():
        raise NotFoundError("nothing here")

    await respond_async(handle, produce())
    assert handle.response.status_code == 404
    assert json.loads(handle.response.body) == "nothing here"
