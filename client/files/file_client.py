"""
File client module.

This module handles client-side file transfer functionality: multipart uploads
to the dashboard authenticated with the session cookie.
"""

from pathlib import Path
from typing import Callable, List, Optional

import requests

from common.constants import SESSION_COOKIE_NAME, UPLOAD_FIELD_NAME, UPLOAD_TIMEOUT
from common.endpoints import dashboard_url, is_login_url
from common.exceptions import SessionExpiredError, UploadError
from client.utils.logger import logger


class FileClient:
    """Client-side file transfer functionality."""

    def __init__(self, base_url: str, timeout: float = UPLOAD_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout

    @staticmethod
    def session_headers(token: str) -> dict:
        """Headers that carry the session token the way the browser would."""
        return {'Cookie': f"{SESSION_COOKIE_NAME}={token}"}

    def upload_file(self, file_path: str, token: str) -> requests.Response:
        """Upload a single file to the dashboard.

        Raises SessionExpiredError when the server redirects to the login page
        and UploadError for anything else that goes wrong.
        """
        path = Path(file_path)

        # Validate file path
        try:
            normalized_path = path.resolve()
            if not normalized_path.exists():
                raise UploadError(f"File not found: {file_path}", path.name)
            if not normalized_path.is_file():
                raise UploadError(f"Not a file: {file_path}", path.name)
            size = normalized_path.stat().st_size
        except OSError as e:
            raise UploadError(f"Invalid file path: {e}", path.name) from e

        url = dashboard_url(self.base_url)
        logger.log_file_upload(normalized_path.name, size, url)

        try:
            with open(normalized_path, 'rb') as f:
                response = requests.post(
                    url,
                    files={UPLOAD_FIELD_NAME: (normalized_path.name, f)},
                    headers=self.session_headers(token),
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise UploadError(f"Upload failed for {normalized_path.name}: {e}", normalized_path.name) from e

        if response.history and is_login_url(response.url):
            logger.log_session_expired()
            raise SessionExpiredError()

        if not response.ok:
            raise UploadError(
                f"Upload failed for {normalized_path.name}: HTTP {response.status_code}",
                normalized_path.name
            )

        logger.info(f"Upload complete: {normalized_path.name}")
        return response

    def upload_files(self, file_paths: List[str], token: str,
                     progress: Optional[Callable[[int, int], None]] = None) -> int:
        """Upload files in order, stopping at the first failure.

        Returns the number of uploaded files.
        """
        total = len(file_paths)
        for index, file_path in enumerate(file_paths, start=1):
            self.upload_file(file_path, token)
            if progress:
                progress(index, total)
        return total
