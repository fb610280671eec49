"""
Client configuration module.

This module handles the persisted client configuration: the dashboard URL and
the session token, stored as a flat JSON object in the user data directory.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from PyQt6.QtCore import QStandardPaths

from common.constants import APP_NAME, CONFIG_FILE_NAME, CONFIG_KEY_URL, CONFIG_KEY_AUTH_TOKEN
from client.utils.logger import logger


def default_config_path() -> Path:
    """Location of config.json in the per-user application data directory."""
    data_dir = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if not data_dir:
        data_dir = str(Path.home() / f".{APP_NAME.lower()}")
    return Path(data_dir) / CONFIG_FILE_NAME


def _read_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


class ConfigStore:
    """Client configuration backed by a JSON file.

    The whole file is rewritten on every save. Keys the client does not use
    are preserved as loaded.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_config_path()
        self._data: Dict[str, Any] = {}

    @property
    def url(self) -> Optional[str]:
        return _read_str(self._data, CONFIG_KEY_URL)

    @url.setter
    def url(self, value: Optional[str]):
        if value is None:
            self._data.pop(CONFIG_KEY_URL, None)
        else:
            self._data[CONFIG_KEY_URL] = value.rstrip('/')

    @property
    def auth_token(self) -> Optional[str]:
        return _read_str(self._data, CONFIG_KEY_AUTH_TOKEN)

    @auth_token.setter
    def auth_token(self, value: Optional[str]):
        if value is not None and not isinstance(value, str):
            raise TypeError("auth token must be a string or None")
        self._data[CONFIG_KEY_AUTH_TOKEN] = value

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)

    def load(self) -> Dict[str, Any]:
        """Load the config file, creating an empty one on first run.

        I/O and parse errors are logged and leave an empty config.
        """
        try:
            if self.path.exists():
                data = json.loads(self.path.read_text(encoding='utf-8'))
                if not isinstance(data, dict):
                    logger.warning(f"Ignoring config that is not a JSON object: {self.path}")
                    data = {}
                self._data = data
            else:
                self._data = {}
                self._write()
                logger.info(f"Created config file: {self.path}")
        except (OSError, ValueError) as e:
            logger.log_error("config load", e)
            self._data = {}
        return self.to_dict()

    def reload(self) -> Dict[str, Any]:
        """Re-read the file after another component changed it."""
        try:
            if self.path.exists():
                data = json.loads(self.path.read_text(encoding='utf-8'))
                if isinstance(data, dict):
                    self._data = data
        except (OSError, ValueError) as e:
            logger.log_error("config reload", e)
        return self.to_dict()

    def save(self) -> bool:
        """Rewrite the config file. Failures are logged only."""
        try:
            self._write()
            return True
        except (OSError, TypeError) as e:
            logger.log_error("config save", e)
            return False

    def clear_session(self):
        """Forget the session token and persist the change."""
        self.auth_token = None
        self.save()
        logger.log_logout()

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def _write(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding='utf-8')
