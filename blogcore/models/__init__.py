"""Database models for the application."""

from blogcore.models.blog import BlogDB
from blogcore.models.state import SINGLETON_ID, AutosaveConfigDB, SessionStateDB
from blogcore.models.user import UserDB

__all__ = ["SINGLETON_ID", "AutosaveConfigDB", "BlogDB", "SessionStateDB", "UserDB"]
