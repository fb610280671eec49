"""
Server URL prompt.

Small modal dialog that asks for the dashboard URL and writes it to the config
file when saved.
"""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QLineEdit, QDialogButtonBox
)

from common.constants import APP_NAME, URL_WINDOW_SIZE
from common.endpoints import normalize_base_url
from common.exceptions import InvalidUrlError
from client.utils.config import ConfigStore
from client.utils.logger import logger


class UrlDialog(QDialog):
    """Prompt for the dashboard server URL."""

    def __init__(self, store: ConfigStore, parent=None):
        super().__init__(parent)
        self.store = store
        self.setup_ui()

    def setup_ui(self):
        """Setup the UI for the URL prompt."""
        self.setWindowTitle(f"{APP_NAME} - Server URL")
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)
        self.resize(*URL_WINDOW_SIZE)

        layout = QVBoxLayout()

        label = QLabel("Enter your dashboard URL:")
        layout.addWidget(label)

        self.url_input = QLineEdit()
        self.url_input.setPlaceholderText("https://example.com")
        self.url_input.setText(self.store.url or "")
        self.url_input.returnPressed.connect(self.save_url)
        layout.addWidget(self.url_input)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #E74C3C;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        self.buttons.accepted.connect(self.save_url)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

        self.setLayout(layout)

    def save_url(self):
        """Validate the entered URL and persist it."""
        try:
            url = normalize_base_url(self.url_input.text())
        except InvalidUrlError as e:
            self.error_label.setText(str(e))
            self.error_label.setVisible(True)
            return

        self.store.url = url
        if not self.store.save():
            self.error_label.setText("Could not save configuration")
            self.error_label.setVisible(True)
            return

        logger.debug(f"URL prompt saved {url}")
        self.accept()
