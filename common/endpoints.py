"""
Dashboard endpoint definitions for the BubbleCloud tray client.

This module builds the URLs the client talks to and classifies the URLs the
embedded browser navigates to.
"""

import posixpath
from typing import Iterable, Optional
from urllib.parse import unquote, urlparse

from common.constants import (
    LOGIN_PATH, DASHBOARD_PATH, FILES_PATH, SESSION_COOKIE_MARKERS, DEFAULT_DOWNLOAD_NAME
)
from common.exceptions import InvalidUrlError


def normalize_base_url(raw_url: str) -> str:
    """Normalize a user-entered server URL.

    Strips whitespace and trailing slashes and defaults the scheme to http.
    Raises InvalidUrlError when nothing usable is left.
    """
    url = (raw_url or '').strip().rstrip('/')
    if not url:
        raise InvalidUrlError("Server URL is required")

    if '://' not in url:
        url = f"http://{url}"

    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        raise InvalidUrlError(f"Unsupported URL scheme: {parsed.scheme}")
    if not parsed.hostname:
        raise InvalidUrlError(f"Invalid server URL: {raw_url}")

    return url


def build_url(base_url: str, path: str) -> str:
    """Join the server base URL and a route."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def login_url(base_url: str) -> str:
    return build_url(base_url, LOGIN_PATH)


def dashboard_url(base_url: str) -> str:
    return build_url(base_url, DASHBOARD_PATH)


def files_url(base_url: str) -> str:
    return build_url(base_url, FILES_PATH)


def is_dashboard_url(url: str) -> bool:
    """True once the browser has landed on the dashboard after login."""
    return bool(url) and url.endswith(DASHBOARD_PATH)


def is_login_url(url: str) -> bool:
    return bool(url) and url.endswith(LOGIN_PATH)


def is_listing_url(base_url: str, url: str) -> bool:
    """True for navigations that stay inside the file listing."""
    return url.startswith(files_url(base_url))


def cookie_host(base_url: str) -> str:
    return urlparse(base_url).hostname or ''


def filename_from_url(url: str) -> str:
    """Suggested save name for a download link: the basename of its path."""
    name = posixpath.basename(unquote(urlparse(url).path))
    return name or DEFAULT_DOWNLOAD_NAME


def select_session_cookie(cookies: Iterable[dict]) -> Optional[dict]:
    """Return the first cookie whose name looks like a session or auth cookie."""
    for cookie in cookies:
        name = cookie.get('name', '')
        if any(marker in name for marker in SESSION_COOKIE_MARKERS):
            return cookie
    return None
