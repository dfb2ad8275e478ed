"""Legacy data migration use case."""

from xpanel.core.migration.migrate_usecase import (
    MigrateRequest,
    MigrateResponse,
    MigrateUseCase,
)

__all__ = ["MigrateRequest", "MigrateResponse", "MigrateUseCase"]
