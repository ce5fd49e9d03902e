from blogcore.repositories.blog import BlogRepository, ensure_required_fields
from blogcore.repositories.state import StateRepository
from blogcore.repositories.user import UserRepository

__all__ = ["BlogRepository", "StateRepository", "UserRepository", "ensure_required_fields"]
