"""
File transfer module for client-side file operations.

Handles:
- File uploads to the dashboard
- Session expiry detection on upload
"""
