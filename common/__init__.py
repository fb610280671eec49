"""
Shared definitions for the BubbleCloud tray client.

This package contains:
- Constants (routes, window sizes, menu labels)
- Dashboard URL helpers
- Exception types
"""
