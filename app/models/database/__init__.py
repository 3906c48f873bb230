"""Database models - import all models to ensure proper registration."""

from app.models.database.user import User, AuthSession
from app.models.database.dreams import DraftDream, ArchivedDream
from app.models.database.reality import DailyEvent, Conversation, ChatMessage

__all__ = [
    "User",
    "AuthSession",
    "DraftDream",
    "ArchivedDream",
    "DailyEvent",
    "Conversation",
    "ChatMessage",
]
