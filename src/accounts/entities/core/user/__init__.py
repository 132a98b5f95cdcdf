"""User entity module.

- User: Domain entity with field validation
- UserTable: Database persistence model
- UserRepository: Data access layer
"""

from .entity import Role, User
from .repository import UserRepository
from .table import UserTable

__all__ = ["Role", "User", "UserTable", "UserRepository"]
