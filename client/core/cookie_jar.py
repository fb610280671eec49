"""
Cookie bookkeeping for the login view.

The browser reports cookies one at a time; this keeps them in arrival order so
the most recent session cookie wins over one left in the store from an
earlier, expired session.
"""

from typing import Dict, Optional, Tuple

from common.endpoints import select_session_cookie


class SessionCookieJar:
    """Cookies seen by the login view, oldest first."""

    def __init__(self):
        self._cookies: Dict[Tuple[str, str, str], dict] = {}

    @staticmethod
    def _key(cookie: dict) -> Tuple[str, str, str]:
        return cookie.get('name', ''), cookie.get('domain', ''), cookie.get('path', '/')

    def add(self, cookie: dict) -> bool:
        """Record a cookie; re-adding moves it to the newest position."""
        if not cookie.get('name'):
            return False
        key = self._key(cookie)
        self._cookies.pop(key, None)
        self._cookies[key] = dict(cookie)
        return True

    def remove(self, cookie: dict):
        self._cookies.pop(self._key(cookie), None)

    def session_cookie(self) -> Optional[dict]:
        """Newest cookie that looks like a session or auth cookie."""
        return select_session_cookie(reversed(list(self._cookies.values())))

    def __len__(self) -> int:
        return len(self._cookies)
