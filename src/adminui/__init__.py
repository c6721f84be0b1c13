"""Admin table for browsing, searching, editing and deleting user records."""

__version__ = "0.1.0"
