class ImgbbError(Exception):
    """Base class for errors raised by the ImgBB client."""


class ConfigurationError(ImgbbError):
    """Raised before any request when the credential set is incomplete."""


class ApiError(ImgbbError):
    """The service answered with a status outside the 2xx range."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"response status {status}: {message}")
