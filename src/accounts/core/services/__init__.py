"""Core services exports."""

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# User Services
from .user.user_management import UserManagementService

__all__ = [
    # Database Service
    "DbManageService",
    "DbSessionService",
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # User Services
    "UserManagementService",
]
