import socket
from typing import Any, List, Optional, Union

import aiohttp
import pytest
from aiohttp import web
from aiohttp.abc import AbstractResolver
from aiohttp.test_utils import TestServer
from multidict import MultiDict

from imgbb_client import ImgbbAPI

UPLOAD_RESPONSE = {
    "status_code": 200,
    "success": {"message": "image uploaded", "code": 200},
    "image": {
        "name": "pic",
        "extension": "png",
        "width": 10,
        "height": 10,
        "id_encoded": "XYZ789",
        "url": "https://i.ibb.co/XYZ789/pic.png",
        "url_viewer": "https://ibb.co/XYZ789",
        "delete_url": "https://ibb.co/XYZ789/0123456789abcdef",
        "user": {"username": "alice", "name": "Alice"},
    },
    "request": {"action": "upload", "type": "file"},
    "status_txt": "OK",
}

DELETE_RESPONSE = {"status_code": 200, "success": {"message": "Content deleted", "code": 200}}


class FakeResolver(AbstractResolver):
    """Resolves every host name, subdomains included, to the local test server."""

    def __init__(self, port: int):
        self.port = port

    async def resolve(self, host: str, port: int = 0, family: socket.AddressFamily = socket.AF_INET) -> List[Any]:
        return [
            {
                "hostname": host,
                "host": "127.0.0.1",
                "port": self.port,
                "family": socket.AF_INET,
                "proto": 0,
                "flags": socket.AI_NUMERICHOST,
            }
        ]

    async def close(self) -> None:
        pass


class RecordedRequest:
    def __init__(self, request: web.Request, form: MultiDict):
        self.hostname = request.host.split(":")[0]
        self.path = request.path
        self.headers = request.headers
        self.content_type = request.content_type
        self.form = form


class FakeImgbb:
    def __init__(self) -> None:
        self.port = 0
        self.requests: List[RecordedRequest] = []
        self.status = 200
        self.response: Optional[Union[dict, str]] = UPLOAD_RESPONSE

    def reply(self, status: int, response: Optional[Union[dict, str]]) -> None:
        self.status = status
        self.response = response

    async def handle(self, request: web.Request) -> web.Response:
        form = MultiDict()
        for name, value in (await request.post()).items():
            if isinstance(value, web.FileField):
                value = {"filename": value.filename, "content_type": value.content_type, "data": value.file.read()}
            form.add(name, value)
        self.requests.append(RecordedRequest(request, form))

        if isinstance(self.response, dict):
            return web.json_response(self.response, status=self.status)
        return web.Response(status=self.status, text=self.response or "", content_type="text/html")


@pytest.fixture
async def imgbb_server():
    fake = FakeImgbb()
    app = web.Application()
    app.router.add_post("/json", fake.handle)
    server = TestServer(app, host="127.0.0.1")
    await server.start_server()
    fake.port = server.port
    yield fake
    await server.close()


@pytest.fixture
async def client_session(imgbb_server):
    connector = aiohttp.TCPConnector(resolver=FakeResolver(imgbb_server.port))
    session = aiohttp.ClientSession(connector=connector, cookie_jar=aiohttp.DummyCookieJar())
    yield session
    await session.close()


@pytest.fixture
def api(imgbb_server, client_session) -> ImgbbAPI:
    return ImgbbAPI(
        "key123",
        "PHPSESSID=abc",
        "alice",
        host=f"imgbb.test:{imgbb_server.port}",
        scheme="http",
        session=client_session,
    )
