#!/usr/bin/env python3
"""
BubbleCloud - Tray Application Launcher
Upload files to and download files from a BubbleCloud dashboard
"""

import sys
import os
import argparse
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def check_dependencies():
    """Check if all required dependencies are installed."""
    missing = []

    # Check PyQt6
    try:
        import PyQt6
    except ImportError:
        missing.append("PyQt6")

    # Check Qt WebEngine
    try:
        import PyQt6.QtWebEngineWidgets
    except ImportError:
        missing.append("PyQt6-WebEngine")

    # Check requests
    try:
        import requests
    except ImportError:
        missing.append("requests")

    return missing


def configure_application(app):
    """Name the Qt application; the tray keeps running with no window open."""
    from common.constants import APP_NAME

    # Application name only, so the data dir is <AppData>/BubbleCloud
    app.setApplicationName(APP_NAME)
    app.setQuitOnLastWindowClosed(False)


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(
        description='BubbleCloud - tray uploader/downloader',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the tray app
  python main_app.py

  # Use a different config file
  python main_app.py --config ~/bubblecloud-test.json
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config.json (default: user data directory)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--check-deps',
        action='store_true',
        help='Check dependencies and exit'
    )

    args = parser.parse_args()

    # Check dependencies
    missing_deps = check_dependencies()

    if args.check_deps:
        if missing_deps:
            print("Missing dependencies:")
            for dep in missing_deps:
                print(f"  - {dep}")
            print("\nInstall with: pip install -e .")
            return 1
        else:
            print("All dependencies are installed!")
            return 0

    if missing_deps:
        print("ERROR: Missing dependencies:")
        for dep in missing_deps:
            print(f"  - {dep}")
        print("\nInstall with: pip install -e .")
        return 1

    # WebEngine modules must be imported before the QApplication exists
    from PyQt6.QtWidgets import QApplication, QMessageBox
    from client.ui.tray import TrayApp
    from client.utils.config import ConfigStore
    from client.utils.logger import logger

    if args.debug:
        logger.set_level(logging.DEBUG)

    # Create Qt application
    app = QApplication(sys.argv)
    configure_application(app)

    try:
        store = ConfigStore(args.config)
        store.load()
        logger.info(f"Using config file: {store.path}")

        tray = TrayApp(store)
        tray.start()

        # Run application
        return app.exec()

    except Exception as e:
        logger.log_error("startup", e)
        QMessageBox.critical(
            None,
            "Application Error",
            f"Failed to start application:\n{str(e)}\n\n"
            "Please check the console for more details."
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
