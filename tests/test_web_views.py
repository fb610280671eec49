#!/usr/bin/env python3
"""
Unit tests for the embedded browser views in client/ui/web_views.py

Covers:
- Session cookie capture in the login view, including a cookie that lands
  after the dashboard has loaded
- Which dashboard navigations are turned into downloads
- Download completion and failure handling in the file browser
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# WebEngine must be imported before the QApplication is created
from PyQt6.QtWebEngineWidgets import QWebEngineView  # noqa: F401
from PyQt6.QtCore import QUrl
from PyQt6.QtNetwork import QNetworkCookie
from PyQt6.QtWebEngineCore import QWebEngineDownloadRequest, QWebEnginePage
from PyQt6.QtWidgets import QApplication

from client.core.cookie_jar import SessionCookieJar
from client.ui.web_views import (
    DashboardPage, FileBrowserDialog, LoginDialog, cookie_to_dict, intercepts_navigation
)
from client.utils.config import ConfigStore

BASE_URL = "http://localhost:5000"
NavigationType = QWebEnginePage.NavigationType
DownloadState = QWebEngineDownloadRequest.DownloadState


class QtTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        """Create QApplication once for all tests."""
        if not QApplication.instance():
            cls.app = QApplication([])
        else:
            cls.app = QApplication.instance()


def make_network_cookie(name, value, domain):
    cookie = QNetworkCookie(name.encode('utf-8'), value.encode('utf-8'))
    cookie.setDomain(domain)
    cookie.setPath('/')
    return cookie


class TestLoginDialogCapture(QtTestCase):
    """Test cases for picking up the session cookie after login."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.store = ConfigStore(Path(self.temp_dir.name) / "config.json")
        self.store.load()
        self.store.url = BASE_URL
        self.store.save()

        # Drive the handlers without opening a browser window
        self.dialog = Mock()
        self.dialog.store = self.store
        self.dialog.cookie_jar = SessionCookieJar()
        self.dialog._current_url = ''
        self.dialog._try_capture_session = lambda: LoginDialog._try_capture_session(self.dialog)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_cookie_to_dict(self):
        cookie = make_network_cookie('session', 'abc', 'localhost')

        self.assertEqual(
            cookie_to_dict(cookie),
            {'name': 'session', 'value': 'abc', 'domain': 'localhost', 'path': '/'}
        )

    def test_capture_on_dashboard(self):
        LoginDialog._on_cookie_added(self.dialog, make_network_cookie('session', 'tok-1', 'localhost'))
        self.dialog.accept.assert_not_called()

        LoginDialog._on_url_changed(self.dialog, QUrl(f"{BASE_URL}/dashboard"))

        self.dialog.accept.assert_called_once()
        self.assertEqual(self.store.auth_token, "tok-1")
        self.assertEqual(ConfigStore(self.store.path).load().get("authToken"), "tok-1")

    def test_cookie_arriving_after_dashboard_is_captured(self):
        LoginDialog._on_url_changed(self.dialog, QUrl(f"{BASE_URL}/dashboard"))
        self.dialog.accept.assert_not_called()
        self.assertIsNone(self.store.auth_token)

        LoginDialog._on_cookie_added(self.dialog, make_network_cookie('session', 'late-token', 'localhost'))

        self.dialog.accept.assert_called_once()
        self.assertEqual(self.store.auth_token, "late-token")

    def test_no_capture_while_on_login_page(self):
        LoginDialog._on_url_changed(self.dialog, QUrl(f"{BASE_URL}/login"))
        LoginDialog._on_cookie_added(self.dialog, make_network_cookie('session', 'tok', 'localhost'))

        self.dialog.accept.assert_not_called()
        self.assertIsNone(self.store.auth_token)

    def test_fresh_cookie_wins_over_loaded_domain_cookie(self):
        """The stored domain cookie is reported first; the new login cookie must be saved."""
        LoginDialog._on_cookie_added(self.dialog, make_network_cookie('session', 'expired-token', '.localhost'))
        LoginDialog._on_cookie_added(self.dialog, make_network_cookie('session', 'fresh-token', 'localhost'))

        LoginDialog._on_url_changed(self.dialog, QUrl(f"{BASE_URL}/dashboard"))

        self.assertEqual(self.store.auth_token, "fresh-token")

    def test_removed_cookie_is_forgotten(self):
        cookie = make_network_cookie('session', 'tok', 'localhost')
        LoginDialog._on_cookie_added(self.dialog, cookie)
        LoginDialog._on_cookie_removed(self.dialog, cookie)

        LoginDialog._on_url_changed(self.dialog, QUrl(f"{BASE_URL}/dashboard"))

        self.dialog.accept.assert_not_called()


class TestDashboardNavigation(QtTestCase):
    """Test cases for telling download links apart from page navigation."""

    def test_clicked_file_link_is_intercepted(self):
        url = QUrl(f"{BASE_URL}/files/report.pdf")
        self.assertTrue(intercepts_navigation(BASE_URL, url, NavigationType.NavigationTypeLinkClicked, True))

    def test_form_submit_outside_listing_is_intercepted(self):
        url = QUrl(f"{BASE_URL}/download?id=3")
        self.assertTrue(intercepts_navigation(BASE_URL, url, NavigationType.NavigationTypeFormSubmitted, True))

    def test_redirect_to_login_is_not_intercepted(self):
        url = QUrl(f"{BASE_URL}/login")
        self.assertFalse(intercepts_navigation(BASE_URL, url, NavigationType.NavigationTypeRedirect, True))

    def test_typed_and_reload_navigations_pass(self):
        url = QUrl(f"{BASE_URL}/dashboard")
        self.assertFalse(intercepts_navigation(BASE_URL, url, NavigationType.NavigationTypeTyped, True))
        self.assertFalse(intercepts_navigation(BASE_URL, url, NavigationType.NavigationTypeReload, True))

    def test_listing_links_pass(self):
        url = QUrl(f"{BASE_URL}/app-api/get-files?page=2")
        self.assertFalse(intercepts_navigation(BASE_URL, url, NavigationType.NavigationTypeLinkClicked, True))

    def test_subframe_and_non_http_links_pass(self):
        self.assertFalse(intercepts_navigation(
            BASE_URL, QUrl(f"{BASE_URL}/files/a.txt"), NavigationType.NavigationTypeLinkClicked, False
        ))
        self.assertFalse(intercepts_navigation(
            BASE_URL, QUrl("mailto:admin@example.com"), NavigationType.NavigationTypeLinkClicked, True
        ))

    def test_page_emits_intercepted_link(self):
        page = Mock(spec=DashboardPage)
        page.base_url = BASE_URL

        accepted = DashboardPage.acceptNavigationRequest(
            page, QUrl(f"{BASE_URL}/files/report.pdf"), NavigationType.NavigationTypeLinkClicked, True
        )

        self.assertFalse(accepted)
        page.link_intercepted.emit.assert_called_once_with(f"{BASE_URL}/files/report.pdf")

    def test_page_lets_redirect_through(self):
        page = Mock(spec=DashboardPage)
        page.base_url = BASE_URL
        url = QUrl(f"{BASE_URL}/login")

        with patch.object(QWebEnginePage, 'acceptNavigationRequest', return_value=True) as base_accept:
            accepted = DashboardPage.acceptNavigationRequest(
                page, url, NavigationType.NavigationTypeRedirect, True
            )

        self.assertTrue(accepted)
        base_accept.assert_called_once_with(url, NavigationType.NavigationTypeRedirect, True)
        page.link_intercepted.emit.assert_not_called()


class TestFileBrowserDownloads(QtTestCase):
    """Test cases for download start and completion in the file browser."""

    def setUp(self):
        self.browser = Mock()
        self.browser._closing = False
        self.browser._pending = {}
        self.save_path = os.path.join(tempfile.gettempdir(), "report.pdf")

    def make_download(self, state, finished=True):
        download = Mock()
        download.isFinished.return_value = finished
        download.state.return_value = state
        download.interruptReasonString.return_value = "Network error"
        return download

    def test_requested_download_goes_to_chosen_path(self):
        url = f"{BASE_URL}/files/report.pdf"
        self.browser._pending = {url: self.save_path}
        download = Mock()
        download.page.return_value = self.browser.page
        download.url.return_value = QUrl(url)

        FileBrowserDialog._on_download_requested(self.browser, download)

        download.setDownloadDirectory.assert_called_once_with(os.path.dirname(self.save_path))
        download.setDownloadFileName.assert_called_once_with("report.pdf")
        download.accept.assert_called_once()
        self.assertEqual(self.browser._pending, {})
        self.assertIs(self.browser._active_download, download)

    def test_redirected_download_uses_latest_pick(self):
        self.browser._pending = {f"{BASE_URL}/files/report.pdf": self.save_path}
        download = Mock()
        download.page.return_value = self.browser.page
        download.url.return_value = QUrl(f"{BASE_URL}/storage/abc123")

        FileBrowserDialog._on_download_requested(self.browser, download)

        download.setDownloadFileName.assert_called_once_with("report.pdf")
        download.accept.assert_called_once()

    def test_unexpected_download_is_cancelled(self):
        download = Mock()
        download.page.return_value = self.browser.page
        download.url.return_value = QUrl(f"{BASE_URL}/files/other.bin")

        FileBrowserDialog._on_download_requested(self.browser, download)

        download.cancel.assert_called_once()
        download.accept.assert_not_called()

    def test_download_from_other_page_is_ignored(self):
        download = Mock()
        download.page.return_value = Mock()

        FileBrowserDialog._on_download_requested(self.browser, download)

        download.accept.assert_not_called()
        download.cancel.assert_not_called()

    def test_completed_download_reports_and_closes(self):
        download = self.make_download(DownloadState.DownloadCompleted)

        FileBrowserDialog._on_download_finished(self.browser, download, self.save_path)

        self.browser.progress_changed.emit.assert_called_once_with(-1, -1)
        self.browser.download_finished.emit.assert_called_once_with(True, self.save_path)
        self.browser.show_download_complete.assert_called_once_with(self.save_path)
        self.browser.close.assert_called_once()
        self.assertIsNone(self.browser._active_download)

    @patch('client.ui.web_views.QMessageBox')
    def test_failed_download_keeps_window_open(self, mock_box):
        download = self.make_download(DownloadState.DownloadInterrupted)

        FileBrowserDialog._on_download_finished(self.browser, download, self.save_path)

        self.browser.download_finished.emit.assert_called_once_with(False, self.save_path)
        mock_box.critical.assert_called_once_with(
            self.browser, "Download Failed", "Download failed: Network error"
        )
        self.browser.show_download_complete.assert_not_called()
        self.browser.close.assert_not_called()

    @patch('client.ui.web_views.QMessageBox')
    def test_download_cancelled_by_closing_is_silent(self, mock_box):
        self.browser._closing = True
        download = self.make_download(DownloadState.DownloadCancelled)

        FileBrowserDialog._on_download_finished(self.browser, download, self.save_path)

        mock_box.critical.assert_not_called()
        self.browser.download_finished.emit.assert_not_called()

    def test_unfinished_download_is_ignored(self):
        download = self.make_download(DownloadState.DownloadInProgress, finished=False)

        FileBrowserDialog._on_download_finished(self.browser, download, self.save_path)

        self.browser.download_finished.emit.assert_not_called()
        self.browser.close.assert_not_called()


if __name__ == '__main__':
    unittest.main()
