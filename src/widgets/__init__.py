"""
Custom UI widgets for the chat TUI.
"""
from .input_area import InputArea
from .chat_log import ChatLog

__all__ = ["InputArea", "ChatLog"]
