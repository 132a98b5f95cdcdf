"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with validation
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.user import Role, User, UserRepository, UserTable

__all__ = [
    "Role",
    "User",
    "UserTable",
    "UserRepository",
]
