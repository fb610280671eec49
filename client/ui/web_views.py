"""
Embedded browser views.

This module hosts the dashboard pages inside Qt WebEngine:
- LoginDialog: shows the login form and captures the session cookie
- FileBrowserDialog: shows the file listing and turns clicked links into
  downloads saved where the user chooses

Both views share the default WebEngine profile so the cookie jar survives
between them.
"""

import os
from typing import Callable, Dict, Optional

from PyQt6.QtCore import Qt, QUrl, pyqtSignal
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtNetwork import QNetworkCookie
from PyQt6.QtWebEngineCore import QWebEngineDownloadRequest, QWebEnginePage, QWebEngineProfile
from PyQt6.QtWebEngineWidgets import QWebEngineView
from PyQt6.QtWidgets import QDialog, QMessageBox, QProgressBar, QVBoxLayout

from common.constants import APP_NAME, BROWSER_WINDOW_SIZE, LOGIN_WINDOW_SIZE, SESSION_COOKIE_NAME
from common.endpoints import cookie_host, files_url, is_dashboard_url, is_listing_url, login_url
from client.core.cookie_jar import SessionCookieJar
from client.utils.config import ConfigStore
from client.utils.logger import logger

# Navigations the user starts from the page; redirects, reloads and typed
# URLs are left to the engine.
INTERCEPTED_NAVIGATION_TYPES = (
    QWebEnginePage.NavigationType.NavigationTypeLinkClicked,
    QWebEnginePage.NavigationType.NavigationTypeFormSubmitted,
)


def shared_profile() -> QWebEngineProfile:
    """Profile used by every embedded view."""
    return QWebEngineProfile.defaultProfile()


def clear_browser_cookies():
    """Drop all cookies so the next login shows the form again."""
    shared_profile().cookieStore().deleteAllCookies()


def cookie_to_dict(cookie: QNetworkCookie) -> dict:
    return {
        'name': bytes(cookie.name()).decode('utf-8', errors='ignore'),
        'value': bytes(cookie.value()).decode('utf-8', errors='ignore'),
        'domain': cookie.domain() or '',
        'path': cookie.path() or '/',
    }


def intercepts_navigation(base_url: str, url: QUrl, nav_type, is_main_frame: bool) -> bool:
    """True when a navigation in the file browser is a download link."""
    if not is_main_frame or nav_type not in INTERCEPTED_NAVIGATION_TYPES:
        return False
    if url.scheme() not in ('http', 'https'):
        return False
    return not is_listing_url(base_url, url.toString())


# ============================================================================
# LOGIN
# ============================================================================

class LoginDialog(QDialog):
    """Login form host that stores the session token once the dashboard loads."""

    def __init__(self, store: ConfigStore, parent=None):
        super().__init__(parent)
        self.store = store
        self.profile = shared_profile()
        self.cookie_jar = SessionCookieJar()
        self._current_url = ''
        self.setup_ui()

        cookie_store = self.profile.cookieStore()
        cookie_store.cookieAdded.connect(self._on_cookie_added)
        cookie_store.cookieRemoved.connect(self._on_cookie_removed)
        cookie_store.loadAllCookies()

        self.view.load(QUrl(login_url(self.store.url)))

    def setup_ui(self):
        """Setup the UI for the login window."""
        self.setWindowTitle(f"{APP_NAME} - Login")
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)
        self.resize(*LOGIN_WINDOW_SIZE)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)

        self.view = QWebEngineView(self)
        self.view.setPage(QWebEnginePage(self.profile, self.view))
        self.view.urlChanged.connect(self._on_url_changed)
        layout.addWidget(self.view)

        self.setLayout(layout)

    def _on_cookie_added(self, cookie: QNetworkCookie):
        if not self.cookie_jar.add(cookie_to_dict(cookie)):
            return
        # The session cookie can land after the redirect to the dashboard
        if is_dashboard_url(self._current_url):
            self._try_capture_session()

    def _on_cookie_removed(self, cookie: QNetworkCookie):
        self.cookie_jar.remove(cookie_to_dict(cookie))

    def _on_url_changed(self, url: QUrl):
        self._current_url = url.toString()
        logger.debug(f"Login view navigated to {self._current_url}")
        if is_dashboard_url(self._current_url):
            self._try_capture_session()

    def _try_capture_session(self):
        cookie = self.cookie_jar.session_cookie()
        if not cookie:
            return
        self.store.auth_token = cookie['value']
        self.store.save()
        logger.info(f"Captured session cookie '{cookie['name']}'")
        self.accept()

    def done(self, result: int):
        cookie_store = self.profile.cookieStore()
        try:
            cookie_store.cookieAdded.disconnect(self._on_cookie_added)
            cookie_store.cookieRemoved.disconnect(self._on_cookie_removed)
        except TypeError:
            pass  # already disconnected
        super().done(result)


# ============================================================================
# FILE BROWSER
# ============================================================================

class DashboardPage(QWebEnginePage):
    """Page that lets listing navigations through and reports clicked links."""

    link_intercepted = pyqtSignal(str)

    def __init__(self, base_url: str, profile: QWebEngineProfile, parent=None):
        super().__init__(profile, parent)
        self.base_url = base_url

    def acceptNavigationRequest(self, url: QUrl, nav_type, is_main_frame: bool) -> bool:
        if not intercepts_navigation(self.base_url, url, nav_type, is_main_frame):
            return super().acceptNavigationRequest(url, nav_type, is_main_frame)
        target = url.toString()
        logger.debug(f"Intercepted navigation to {target}")
        self.link_intercepted.emit(target)
        return False


class FileBrowserDialog(QDialog):
    """Dashboard file listing with download handling."""

    progress_changed = pyqtSignal(int, int)  # received bytes, total bytes
    download_finished = pyqtSignal(bool, str)  # success, save path

    def __init__(self, base_url: str, token: str,
                 on_link: Callable[[str, 'FileBrowserDialog'], Optional[str]], parent=None):
        super().__init__(parent)
        self.base_url = base_url
        self.token = token
        self.on_link = on_link
        self.profile = shared_profile()
        self._pending: Dict[str, str] = {}  # url -> save path
        self._active_download: Optional[QWebEngineDownloadRequest] = None
        self._closing = False
        self.setup_ui()

        self.profile.downloadRequested.connect(self._on_download_requested)
        self.set_session_cookie()
        self.page.load(QUrl(files_url(self.base_url)))

    def setup_ui(self):
        """Setup the UI for the file browser."""
        self.setWindowTitle(f"{APP_NAME} - Download Files")
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
        self.resize(*BROWSER_WINDOW_SIZE)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)

        self.view = QWebEngineView(self)
        self.page = DashboardPage(self.base_url, self.profile, self.view)
        self.page.link_intercepted.connect(self._on_link_intercepted, Qt.ConnectionType.QueuedConnection)
        self.view.setPage(self.page)
        layout.addWidget(self.view)

        # Progress bar for downloads
        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        self.setLayout(layout)

    def set_session_cookie(self):
        """Hand the stored token to the browser as the session cookie."""
        cookie = QNetworkCookie(SESSION_COOKIE_NAME.encode('utf-8'), self.token.encode('utf-8'))
        cookie.setDomain(cookie_host(self.base_url))
        cookie.setPath('/')
        cookie.setSecure(False)
        cookie.setHttpOnly(False)
        self.profile.cookieStore().setCookie(cookie, QUrl(self.base_url))

    def _on_link_intercepted(self, url: str):
        try:
            self.on_link(url, self)
        except Exception as e:
            logger.log_error("download link", e)
            QMessageBox.critical(self, "Download Failed", f"Could not start download:\n{e}")

    def start_download(self, url: str, save_path: str):
        """Download a link through the browser so the session cookie applies."""
        self._pending[url] = save_path
        self.page.download(QUrl(url), os.path.basename(save_path))

    def _on_download_requested(self, download: QWebEngineDownloadRequest):
        if download.page() is not self.page:
            return

        url = download.url().toString()
        save_path = self._pending.pop(url, None)
        if save_path is None:
            # Server redirected the link; use the most recent pick
            if not self._pending:
                logger.warning(f"Ignoring unexpected download: {url}")
                download.cancel()
                return
            save_path = self._pending.pop(next(reversed(self._pending)))

        download.setDownloadDirectory(os.path.dirname(save_path))
        download.setDownloadFileName(os.path.basename(save_path))
        download.receivedBytesChanged.connect(lambda: self._on_progress(download))
        download.totalBytesChanged.connect(lambda: self._on_progress(download))
        download.isFinishedChanged.connect(lambda: self._on_download_finished(download, save_path))
        self._active_download = download

        self.progress_bar.setValue(0)
        self.progress_bar.setVisible(True)
        download.accept()

    def _on_progress(self, download: QWebEngineDownloadRequest):
        received = download.receivedBytes()
        total = download.totalBytes()
        logger.log_download_progress(received, total)
        if total > 0:
            self.progress_bar.setRange(0, 100)
            self.progress_bar.setValue(int(received / total * 100))
        else:
            # Unknown size: busy indicator
            self.progress_bar.setRange(0, 0)
        self.progress_changed.emit(received, total)

    def _on_download_finished(self, download: QWebEngineDownloadRequest, save_path: str):
        if not download.isFinished():
            return

        self._active_download = None
        if self._closing:
            logger.info(f"Download abandoned: {save_path}")
            return
        self.progress_bar.setVisible(False)
        self.progress_bar.setRange(0, 100)
        self.progress_changed.emit(-1, -1)

        if download.state() == QWebEngineDownloadRequest.DownloadState.DownloadCompleted:
            logger.info(f"Download complete: {save_path}")
            self.download_finished.emit(True, save_path)
            self.show_download_complete(save_path)
            self.close()
        else:
            reason = download.interruptReasonString() or download.state().name
            logger.error(f"Download failed, keeping window open: {reason}")
            self.download_finished.emit(False, save_path)
            QMessageBox.critical(self, "Download Failed", f"Download failed: {reason}")

    def show_download_complete(self, save_path: str):
        """Tell the user where the file went, offering to open its folder."""
        box = QMessageBox(self)
        box.setIcon(QMessageBox.Icon.Information)
        box.setWindowTitle("Download Complete")
        box.setText("File downloaded successfully!")
        box.setInformativeText(
            f"Saved as: {os.path.basename(save_path)}\nLocation: {os.path.dirname(save_path)}"
        )
        box.addButton(QMessageBox.StandardButton.Ok)
        show_button = box.addButton("Show in Folder", QMessageBox.ButtonRole.ActionRole)
        box.exec()
        if box.clickedButton() is show_button:
            QDesktopServices.openUrl(QUrl.fromLocalFile(os.path.dirname(save_path)))

    def done(self, result: int):
        """Clean up the profile connection when the window closes."""
        self._closing = True
        if self._active_download is not None:
            self._active_download.cancel()
            self._active_download = None
        try:
            self.profile.downloadRequested.disconnect(self._on_download_requested)
        except TypeError:
            pass  # already disconnected
        super().done(result)
