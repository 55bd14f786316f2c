"""Single-user task management core: SQLite store, one-shot remote import, async service."""

__version__ = "0.1.0"
