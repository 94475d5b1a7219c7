import logging
import re
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional, Sequence, Union

import aiohttp

from .errors import ApiError, ConfigurationError
from .types import ApiConfig, DeleteResponse, ImageUploadExpiration, ImageUploadResult
from .util import ImageSource, guess_mime_type, to_blob

logger = logging.getLogger(__name__)

HOST = "imgbb.com"
ENDPOINT = "/json"
CDN_HOST = "i.ibb.co"
DEFAULT_IMAGE_NAME = "image.png"
NO_ERROR_MESSAGE = "no error message provided"

IMAGE_ID_PATTERN = re.compile(rf"^https?://{re.escape(CDN_HOST)}/(\w+)/", re.IGNORECASE | re.ASCII)


def get_image_id_by_url(url_or_account: Union[str, Mapping[str, Any], Any, None]) -> Optional[str]:
    """Returns the image id of a CDN url such as ``https://i.ibb.co/<id>/<name>``.

    Accepts the url itself or an account-like record (object or mapping) with an ``image`` url.
    """
    if url_or_account is None or isinstance(url_or_account, str):
        url = url_or_account
    elif isinstance(url_or_account, Mapping):
        url = url_or_account.get("image")
    else:
        url = getattr(url_or_account, "image", None)

    if not url or not isinstance(url, str):
        return None

    match = IMAGE_ID_PATTERN.match(url)
    return match.group(1) if match else None


class ImgbbAPI:
    def __init__(
        self,
        key: Optional[str] = None,
        cookie: Optional[str] = None,
        username: Optional[str] = None,
        *,
        host: str = HOST,
        scheme: str = "https",
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.host = host
        self.scheme = scheme
        self.website = f"{scheme}://{host}"

        self.key: Optional[str] = None
        self.cookie: Optional[str] = None
        self.username: Optional[str] = None
        self.configure(key, cookie, username)

        # Sessions handed in by the caller are theirs to close
        self.session = session
        self._owns_session = session is None

    def configure(self, key: Optional[str] = None, cookie: Optional[str] = None, username: Optional[str] = None) -> None:
        self.key, self.cookie, self.username = key, cookie, username

    @property
    def config(self) -> ApiConfig:
        return {"key": self.key, "cookie": self.cookie, "username": self.username}

    def _ensure_credentials(self) -> None:
        if not self.key or not self.cookie or not self.username:
            raise ConfigurationError("ImgBB credentials not configured, please use configure()")

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            # The configured cookie must be the only one sent, so never store what the server sets
            self.session = aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())
        return self.session

    def user_origin(self, username: Optional[str] = None) -> str:
        return f"{self.scheme}://{username or self.username}.{self.host}"

    @asynccontextmanager
    async def api_request(
        self,
        body: aiohttp.FormData,
        *,
        username: Optional[str] = None,
        cookie: Optional[str] = None,
        origin: Optional[str] = None,
        endpoint: Optional[str] = None,
        endpoint_use_origin: bool = False,
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        self._ensure_credentials()

        origin = origin or self.user_origin(username)
        url = endpoint or f"{origin if endpoint_use_origin else self.website}{ENDPOINT}"
        headers = {"cookie": cookie or self.cookie, "origin": origin}

        logger.debug(f"POST {url} with origin {origin}")
        async with self._get_session().post(url, data=body, headers=headers) as resp:
            if not 200 <= resp.status < 300:
                raise ApiError(resp.status, await self._error_message(resp))
            yield resp

    @staticmethod
    async def _error_message(resp: aiohttp.ClientResponse) -> str:
        try:
            data = await resp.json(content_type=None)
        except ValueError:
            return NO_ERROR_MESSAGE

        error = data.get("error") if isinstance(data, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        return str(message) if message else NO_ERROR_MESSAGE

    @staticmethod
    async def _decode(resp: aiohttp.ClientResponse) -> Any:
        data = await resp.json(content_type=None)
        # aiohttp decodes an empty body to None, which is not a response
        if data is None:
            raise ApiError(resp.status, NO_ERROR_MESSAGE)
        return data

    async def upload_image(
        self,
        image: ImageSource,
        *,
        username: Optional[str] = None,
        expiration: Optional[Union[ImageUploadExpiration, str]] = None,
        album: Optional[str] = None,
        name: Optional[str] = None,
    ) -> ImageUploadResult:
        self._ensure_credentials()

        username = username or self.username
        if expiration is None:
            expiration = ImageUploadExpiration.SIX_MONTHS
        expiration = ImageUploadExpiration(expiration)
        name = name or DEFAULT_IMAGE_NAME

        blob = to_blob(image, guess_mime_type(name))

        body = aiohttp.FormData(default_to_multipart=True)
        body.add_field("action", "upload")
        body.add_field("album_id", album or "")
        body.add_field("auth_token", self.key)
        body.add_field("expiration", expiration.value)
        body.add_field("source", blob, filename=name)
        body.add_field("timestamp", str(int(time.time() * 1000)))
        body.add_field("type", "file")

        async with self.api_request(body, username=username) as resp:
            response = await self._decode(resp)
            return response

    async def remove_images(self, ids: Union[str, Sequence[str]]) -> Optional[DeleteResponse]:
        self._ensure_credentials()

        if len(ids) == 0:
            return None

        body = aiohttp.FormData(default_to_multipart=True)
        body.add_field("action", "delete")
        body.add_field("auth_token", self.key)

        if isinstance(ids, str):
            body.add_field("single", "true")
            body.add_field("delete", "image")
            body.add_field("deleting[id]", ids)
        else:
            body.add_field("from", "list")
            body.add_field("multiple", "true")
            body.add_field("delete", "images")
            for image_id in ids:
                body.add_field("deleting[ids][]", image_id)

        # Deletes go to the account subdomain, not the main site
        async with self.api_request(body, endpoint_use_origin=True) as resp:
            response = await self._decode(resp)
            return response

    async def close(self) -> None:
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()
            self.session = None

    async def __aenter__(self) -> "ImgbbAPI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
