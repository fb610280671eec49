"""
Transfer controller module.

This module sequences the user-triggered actions of the tray client: URL
setup, login, upload with one re-login on session expiry, and the download
browser. It holds no widgets; everything visible goes through the ``ui``
object handed in by the tray (see ``client.ui.tray.TrayApp``), which makes the
flows testable without a display.

The ``ui`` object provides:
    prompt_url() -> bool
    request_login() -> bool
    clear_browser_session()
    choose_upload_files() -> list of paths
    choose_save_path(suggested_name) -> path or None
    open_file_browser(base_url, token, on_link)
    run_background(func, on_done)      # func(progress); on_done(success, error, result)
    show_info(title, message)
    show_error(title, message)
    refresh_menu()
"""

from typing import Callable, List, Optional

from common.endpoints import filename_from_url, is_listing_url
from common.exceptions import SessionExpiredError
from client.files.file_client import FileClient
from client.utils.config import ConfigStore
from client.utils.logger import logger


class TransferController:
    """Drives login, upload and download on behalf of the tray menu."""

    def __init__(self, store: ConfigStore, ui, file_client_factory: Callable[[str], FileClient] = FileClient):
        self.store = store
        self.ui = ui
        self.file_client_factory = file_client_factory
        self.upload_in_progress = False

    # ========================================================================
    # SESSION
    # ========================================================================

    def startup(self):
        """First-run sequence: ask for the URL, then log in."""
        if not self.store.url:
            self.change_url(relogin=False)
        if self.store.url and not self.store.is_authenticated:
            self.login()

    def ensure_url(self) -> bool:
        if self.store.url:
            return True
        self.change_url(relogin=False)
        return bool(self.store.url)

    def ensure_authenticated(self) -> bool:
        """Make sure a session token exists, showing the login view if needed."""
        if not self.ensure_url():
            return False
        if self.store.is_authenticated:
            return True
        return self.login()

    def login(self) -> bool:
        if not self.store.url:
            return False
        success = self.ui.request_login()
        logger.log_login(self.store.url, success)
        self.ui.refresh_menu()
        return success

    def change_url(self, relogin: bool = True) -> bool:
        """Prompt for a new server URL; a changed server invalidates the session."""
        previous = self.store.url
        accepted = self.ui.prompt_url()
        self.store.reload()
        if not accepted:
            logger.log_cancelled("URL change")
            return False

        logger.log_url_change(self.store.url)
        if relogin or self.store.url != previous:
            self.store.clear_session()
            self.ui.clear_browser_session()
        if relogin:
            self.login()
        self.ui.refresh_menu()
        return True

    def logout(self):
        self.store.clear_session()
        self.ui.clear_browser_session()
        self.ui.refresh_menu()

    # ========================================================================
    # UPLOAD
    # ========================================================================

    def upload_files(self) -> bool:
        """Ask for files and upload them. Returns False when nothing was sent."""
        if self.upload_in_progress:
            self.ui.show_info("Upload in Progress", "Please wait for the current upload to finish.")
            return False

        if not self.ensure_authenticated():
            return False

        file_paths = self.ui.choose_upload_files()
        if not file_paths:
            logger.log_cancelled("Upload")
            return False

        self._start_upload(list(file_paths), retried=False)
        return True

    def _start_upload(self, file_paths: List[str], retried: bool):
        self.upload_in_progress = True
        file_client = self.file_client_factory(self.store.url)
        token = self.store.auth_token

        def on_done(success, error, result):
            self._on_upload_done(file_paths, retried, success, error, result)

        def upload(progress):
            return file_client.upload_files(file_paths, token, progress=progress)

        self.ui.run_background(upload, on_done)

    def _on_upload_done(self, file_paths: List[str], retried: bool, success: bool, error: str, result):
        self.upload_in_progress = False

        if success:
            logger.info(f"Uploaded {result} file(s)")
            self.ui.show_info("Upload Complete", "File(s) uploaded successfully!")
            self.ui.refresh_menu()
            return

        if isinstance(result, SessionExpiredError):
            self.store.clear_session()
            # The old cookie would be captured again by the login view
            self.ui.clear_browser_session()
            self.ui.refresh_menu()
            if retried:
                self.ui.show_error("Upload Error", error)
                return
            if self.login():
                logger.info("Retrying upload after re-authentication")
                self._start_upload(file_paths, retried=True)
            return

        logger.error(f"Upload failed: {error}")
        self.ui.show_error("Upload Error", error)

    # ========================================================================
    # DOWNLOAD
    # ========================================================================

    def download_files(self) -> bool:
        """Open the dashboard file browser with the stored session."""
        if not self.ensure_authenticated():
            return False
        self.ui.open_file_browser(self.store.url, self.store.auth_token, self.handle_download_link)
        return True

    def handle_download_link(self, url: str, browser) -> Optional[str]:
        """Ask where to save a clicked link and start the download.

        Returns the chosen path, or None when the link belongs to the listing
        or the save dialog was cancelled.
        """
        if is_listing_url(self.store.url, url):
            return None

        save_path = self.ui.choose_save_path(filename_from_url(url))
        if not save_path:
            logger.log_cancelled("Download")
            return None

        logger.log_file_download(filename_from_url(url), save_path)
        browser.start_download(url, save_path)
        return save_path
