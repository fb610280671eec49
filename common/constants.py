"""
Shared constants for the BubbleCloud tray client.

This module contains all constants used across the client components.
"""

# Application
APP_NAME = 'BubbleCloud'
CONFIG_FILE_NAME = 'config.json'

# Config keys (as stored on disk)
CONFIG_KEY_URL = 'url'
CONFIG_KEY_AUTH_TOKEN = 'authToken'

# Dashboard routes
LOGIN_PATH = '/login'
DASHBOARD_PATH = '/dashboard'
FILES_PATH = '/app-api/get-files'

# Session cookie
SESSION_COOKIE_NAME = 'session'
SESSION_COOKIE_MARKERS = ('session', 'auth')

# File Transfer
UPLOAD_FIELD_NAME = 'file'
DEFAULT_DOWNLOAD_NAME = 'download'
UPLOAD_TIMEOUT = 300  # 5 minutes in seconds

# Window sizes (width, height)
URL_WINDOW_SIZE = (400, 200)
LOGIN_WINDOW_SIZE = (500, 700)
BROWSER_WINDOW_SIZE = (800, 600)

# Tray icon
ASSETS_DIR = 'assets'
TRAY_ICON_FILE = 'iconTemplate@2x.png'
TRAY_ICON_FILE_WINDOWS = 'icon.ico'


# Tray menu labels
class MenuLabels:
    UPLOAD = 'Upload Files'
    DOWNLOAD = 'Download Files'
    CHANGE_URL = 'Change URL'
    AUTHENTICATED = 'Authenticated ✓'
    NOT_AUTHENTICATED = 'Not authenticated'
    LOGOUT = 'Log Out'
    QUIT = 'Quit'
