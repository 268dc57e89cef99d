"""
Errors raised by the chat client core.

Only the front-end (app.py) turns these into a diagnostic and an exit status.
"""


class ChatClientError(Exception):
    """Base class for fatal chat client failures."""


class ConfigError(ChatClientError):
    """Startup configuration is missing or invalid."""


class StreamEstablishError(ChatClientError):
    """The streaming request could not be established."""
