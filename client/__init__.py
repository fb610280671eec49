"""
Client package for the BubbleCloud tray application.

This package contains all client-side functionality including:
- Login through the embedded dashboard page
- File upload and download
- Tray menu and dialogs
- Configuration and utilities
"""
