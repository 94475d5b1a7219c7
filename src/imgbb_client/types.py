from enum import Enum
from typing import Any, Optional, TypedDict


class ImageUploadExpiration(str, Enum):
    ONE_HOUR = "PT1H"
    SIX_MONTHS = "P6M"
    NEVER = ""


class ApiConfig(TypedDict, total=False):
    key: str
    cookie: str
    username: str


class ImageUploadImage(TypedDict, total=False):
    filename: str
    name: str
    mime: str
    extension: str
    url: str
    size: int


class Avatar(TypedDict, total=False):
    filename: str
    url: str


class ImageUploadUser(TypedDict, total=False):
    name: str
    username: str
    website: str
    timezone: str
    language: str
    is_private: int
    premium: int
    show_nsfw_listings: int
    image_count: int
    album_count: int
    image_keep_exif: int
    image_expiration: Any
    likes: int
    liked: int
    following: int
    followers: int
    content_views: int
    notifications_unread: int
    notifications_unread_display: int
    image_count_display: str
    album_count_display: str
    url: str
    url_albums: str
    url_liked: str
    url_following: str
    url_followers: str
    website_safe_html: str
    website_display: str
    image_count_label: str
    album_count_label: str
    firstname: str
    firstname_html: str
    name_short: str
    name_short_html: str
    avatar: Avatar


class ImageUploadAlbum(TypedDict, total=False):
    name: str
    time: int
    parent_id: Optional[str]
    cover_id: Any
    privacy: str
    privacy_notes: Optional[str]
    privacy_readable: Optional[str]
    password: Optional[str]
    image_count: int
    description: Optional[str]
    likes: int
    views: int
    id_encoded: str
    url: str
    url_short: str
    name_html: str
    name_with_privacy_readable: str
    name_with_privacy_readable_html: str
    name_truncated: str
    name_truncated_html: str
    display_url: str
    display_width: str
    display_height: str


class UploadedImage(ImageUploadImage, total=False):
    width: int
    height: int
    size_formatted: str
    time: int
    expiration: int
    likes: int
    description: Optional[str]
    original_filename: str
    user: ImageUploadUser
    album: ImageUploadAlbum
    is_animated: int
    is_360: int
    nsfw: int
    id_encoded: str
    url_viewer: str
    url_viewer_preview: str
    url_viewer_thumb: str
    image: ImageUploadImage
    thumb: ImageUploadImage
    display_url: str
    display_width: int
    display_height: int
    delete_url: str
    views_label: str
    likes_label: str
    how_long_ago: str
    date_fixed_peer: str
    title: str
    title_truncated: str
    title_truncated_html: str
    is_use_loader: bool


class UploadSuccess(TypedDict, total=False):
    message: str
    code: int


class UploadRequestEcho(TypedDict, total=False):
    action: str
    album_id: int
    auth_token: str
    expiration: str
    timestamp: str
    type: str


class ImageUploadResult(TypedDict, total=False):
    status_code: int
    status_txt: str
    success: UploadSuccess
    image: UploadedImage
    request: UploadRequestEcho


# Written by the uploader for each file, not returned by the API
class UploadRecord(TypedDict):
    fileName: str
    filePath: str
    id: str
    url: str
    urlViewer: str
    deleteUrl: str
    uploadSuccess: bool


DeleteResponse = dict[str, Any]
