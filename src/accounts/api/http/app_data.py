from dataclasses import dataclass

from src.accounts.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
