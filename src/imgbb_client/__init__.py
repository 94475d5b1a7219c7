from .api import CDN_HOST, HOST, ImgbbAPI, get_image_id_by_url
from .errors import ApiError, ConfigurationError, ImgbbError
from .types import ApiConfig, ImageUploadExpiration, ImageUploadResult

__version__ = "0.1.0"

__all__ = [
    "ApiConfig",
    "ApiError",
    "CDN_HOST",
    "ConfigurationError",
    "HOST",
    "ImageUploadExpiration",
    "ImageUploadResult",
    "ImgbbAPI",
    "ImgbbError",
    "get_image_id_by_url",
]
