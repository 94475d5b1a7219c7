import io
import mimetypes
from typing import Optional, Union

from aiohttp import payload

ImageSource = Union[bytes, bytearray, memoryview, io.IOBase, payload.Payload]


def guess_mime_type(file_name: str) -> Optional[str]:
    return mimetypes.guess_type(file_name)[0] if file_name else None


def to_blob(image: ImageSource, content_type: Optional[str] = None) -> payload.Payload:
    """Normalizes an image to a payload that carries its own content type.

    Payloads pass through untouched, raw bytes and binary file objects get
    wrapped with ``content_type`` when one is known.
    """
    if isinstance(image, payload.Payload):
        return image

    kwargs = {"content_type": content_type} if content_type else {}
    if isinstance(image, (bytes, bytearray, memoryview)):
        blob = payload.BytesPayload(image, **kwargs)
    elif isinstance(image, io.IOBase) and not isinstance(image, io.TextIOBase):
        blob = payload.get_payload(image, **kwargs)
    else:
        blob = image

    if not isinstance(blob, payload.Payload):
        raise TypeError(f"image is not a blob: {type(image).__name__}")

    return blob


def format_size(size: int) -> str:
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024 or unit == "GB":
            break
        size /= 1024
    return f"{size:.1f}{unit}" if unit != "B" else f"{size}B"
