"""
PyQt6 user interface for the tray client: tray menu, URL prompt, login and
file browser views.
"""
