"""
Client logging module.

This module handles client-side logging functionality.
"""

import logging
import sys


class ClientLogger:
    """Client logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger('bubblecloud_client')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        self.console_handler = logging.StreamHandler(sys.stdout)
        self.console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(self.console_handler)

    def set_level(self, log_level: int):
        """Change the log level of the logger and its console handler."""
        self.logger.setLevel(log_level)
        self.console_handler.setLevel(log_level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_login(self, url: str, success: bool):
        """Log login attempt."""
        status = "Logged in" if success else "Login not completed"
        self.info(f"{status} at {url}")

    def log_logout(self):
        """Log session removal."""
        self.info("Session token cleared")

    def log_url_change(self, url: str):
        """Log server URL change."""
        self.info(f"Server URL set to {url}")

    def log_file_upload(self, filename: str, size: int, url: str):
        """Log file upload attempt."""
        self.info(f"Uploading file: {filename} ({size} bytes) to {url}")

    def log_file_download(self, filename: str, save_path: str):
        """Log file download attempt."""
        self.info(f"Downloading file: {filename} -> {save_path}")

    def log_download_progress(self, received: int, total: int):
        """Log download progress."""
        if total > 0:
            self.debug(f"Download progress: {received}/{total} bytes ({received / total * 100:.1f}%)")
        else:
            self.debug(f"Download progress: {received} bytes")

    def log_session_expired(self):
        """Log that the dashboard sent us back to the login page."""
        self.warning("Session expired, re-authentication required")

    def log_cancelled(self, operation: str):
        """Log a dialog the user dismissed."""
        self.info(f"{operation} cancelled by user")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ClientLogger()
