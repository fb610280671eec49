"""
Exception types shared by the BubbleCloud client components.
"""


class BubbleCloudError(Exception):
    """Base class for client errors."""


class InvalidUrlError(BubbleCloudError):
    """The server URL entered by the user cannot be used."""


class SessionExpiredError(BubbleCloudError):
    """The dashboard redirected a request to the login page."""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(message)


class UploadError(BubbleCloudError):
    """A file could not be uploaded."""

    def __init__(self, message: str, filename: str = None):
        super().__init__(message)
        self.filename = filename
