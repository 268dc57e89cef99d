"""
Data models for the chat client.
"""
from .turn import Conversation, Turn

__all__ = ["Conversation", "Turn"]
