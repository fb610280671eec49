"""
Tray application.

Owns the system tray icon and its menu, and provides the dialogs and worker
threads the TransferController asks for.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from PyQt6.QtCore import QObject
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import (
    QApplication, QFileDialog, QMenu, QMessageBox, QStyle, QSystemTrayIcon
)

from common.constants import (
    APP_NAME, ASSETS_DIR, TRAY_ICON_FILE, TRAY_ICON_FILE_WINDOWS, MenuLabels
)
from client.core.transfer_controller import TransferController
from client.ui.url_dialog import UrlDialog
from client.ui.web_views import FileBrowserDialog, LoginDialog, clear_browser_cookies
from client.ui.workers import TaskWorker
from client.utils.config import ConfigStore
from client.utils.logger import logger

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def find_tray_icon() -> Optional[Path]:
    """Locate the tray icon shipped next to the application."""
    icon_name = TRAY_ICON_FILE_WINDOWS if sys.platform == 'win32' else TRAY_ICON_FILE
    candidates = []
    # Frozen builds keep assets beside the executable
    if getattr(sys, 'frozen', False):
        candidates.append(Path(sys.executable).parent / ASSETS_DIR / icon_name)
    candidates.append(PROJECT_ROOT / ASSETS_DIR / icon_name)
    candidates.append(PROJECT_ROOT / TRAY_ICON_FILE)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    logger.error(f"Tray icon not found at: {candidates[0]}")
    return None


class TrayApp(QObject):
    """System tray front end."""

    def __init__(self, store: ConfigStore):
        super().__init__()
        self.store = store
        self.controller = TransferController(store, self)
        self.active_workers: List[TaskWorker] = []
        self._worker_callbacks: Dict[TaskWorker, Callable] = {}
        self.file_browser: Optional[FileBrowserDialog] = None
        self.tray_icon: Optional[QSystemTrayIcon] = None

    def start(self):
        """Run the first-run prompts, then show the tray icon."""
        self.controller.startup()

        icon_path = find_tray_icon()
        if icon_path:
            icon = QIcon(str(icon_path))
        else:
            icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_DriveNetIcon)

        self.tray_icon = QSystemTrayIcon(icon, self)
        self.tray_icon.setToolTip(APP_NAME)
        self.refresh_menu()
        self.tray_icon.show()

    # ========================================================================
    # MENU
    # ========================================================================

    def refresh_menu(self):
        """Rebuild the context menu so the auth status is current."""
        if not self.tray_icon:
            return

        menu = QMenu()
        menu.addAction(MenuLabels.UPLOAD, lambda: self.controller.upload_files())
        menu.addAction(MenuLabels.DOWNLOAD, lambda: self.controller.download_files())
        menu.addSeparator()
        menu.addAction(MenuLabels.CHANGE_URL, lambda: self.controller.change_url())

        status_label = MenuLabels.AUTHENTICATED if self.store.is_authenticated else MenuLabels.NOT_AUTHENTICATED
        status_action = menu.addAction(status_label)
        status_action.setEnabled(False)
        if self.store.is_authenticated:
            menu.addAction(MenuLabels.LOGOUT, self.controller.logout)

        menu.addSeparator()
        menu.addAction(MenuLabels.QUIT, self.quit)

        # Keep a reference; the tray icon does not take ownership
        self.menu = menu
        self.tray_icon.setContextMenu(menu)

    def quit(self):
        """Stop workers and leave the event loop."""
        for worker in self.active_workers[:]:
            if not worker.wait(2000):
                logger.warning("Worker did not exit, forcing termination")
                worker.terminate()
                worker.wait(1000)
        if self.file_browser:
            self.file_browser.close()
        if self.tray_icon:
            self.tray_icon.hide()
        QApplication.quit()

    # ========================================================================
    # DIALOGS
    # ========================================================================

    def prompt_url(self) -> bool:
        dialog = UrlDialog(self.store)
        return bool(dialog.exec())

    def request_login(self) -> bool:
        dialog = LoginDialog(self.store)
        return bool(dialog.exec())

    def clear_browser_session(self):
        clear_browser_cookies()

    def choose_upload_files(self) -> List[str]:
        file_paths, _ = QFileDialog.getOpenFileNames(
            None, f"{APP_NAME} - Upload Files", "", "All Files (*)"
        )
        return file_paths

    def choose_save_path(self, suggested_name: str) -> Optional[str]:
        parent = self.file_browser
        save_path, _ = QFileDialog.getSaveFileName(
            parent, "Save File As...", suggested_name, "All Files (*)"
        )
        return save_path or None

    def open_file_browser(self, base_url: str, token: str, on_link):
        if self.file_browser:
            self.file_browser.raise_()
            self.file_browser.activateWindow()
            return

        self.file_browser = FileBrowserDialog(base_url, token, on_link)
        self.file_browser.progress_changed.connect(self._on_download_progress)
        self.file_browser.destroyed.connect(self._on_file_browser_closed)
        self.file_browser.show()

    def _on_file_browser_closed(self):
        self.file_browser = None

    def _on_download_progress(self, received: int, total: int):
        if not self.tray_icon:
            return
        if received < 0:
            self.tray_icon.setToolTip(APP_NAME)
        elif total > 0:
            self.tray_icon.setToolTip(f"{APP_NAME} - Downloading {received * 100 // total}%")
        else:
            self.tray_icon.setToolTip(f"{APP_NAME} - Downloading {received} bytes")

    def show_info(self, title: str, message: str):
        QMessageBox.information(None, title, message)

    def show_error(self, title: str, message: str):
        QMessageBox.critical(None, title, message)

    # ========================================================================
    # WORKERS
    # ========================================================================

    def run_background(self, func, on_done):
        """Run func on a worker thread and call on_done on the GUI thread."""
        worker = TaskWorker(func)
        worker.task_done.connect(self._on_worker_done)
        worker.progress_changed.connect(self._on_upload_progress)
        self._worker_callbacks[worker] = on_done
        self.active_workers.append(worker)
        if self.tray_icon:
            self.tray_icon.setToolTip(f"{APP_NAME} - Uploading...")
        worker.start()

    def _on_upload_progress(self, done: int, total: int):
        if self.tray_icon:
            self.tray_icon.setToolTip(f"{APP_NAME} - Uploading {done}/{total}")

    def _on_worker_done(self, success: bool, error: str, result):
        worker = self.sender()
        on_done = self._worker_callbacks.pop(worker, None)
        self._release_worker(worker)
        if on_done:
            on_done(success, error, result)

    def _release_worker(self, worker: TaskWorker):
        if worker in self.active_workers:
            self.active_workers.remove(worker)
        worker.wait(1000)
        worker.deleteLater()
        if self.tray_icon and not self.active_workers:
            self.tray_icon.setToolTip(APP_NAME)
