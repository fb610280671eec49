"""
Core client logic that sequences the tray actions.
"""
