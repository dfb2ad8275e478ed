"""Migrate use case: import inbounds from a v2-ui installation.

Never starts the panel. The target store must initialize first; the legacy
inbounds are then attached to the administrative user and inserted in one
transaction.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from xpanel.core.use_case_errors import format_error_message, log_use_case_error
from xpanel.ports.legacy import LegacyInboundSource
from xpanel.ports.progress import ProgressCallback
from xpanel.ports.store import StoreInitializer

logger = logging.getLogger(__name__)


@dataclass
class MigrateRequest:
    """Request to import legacy data.

    Attributes:
        db_path: Target panel store.
        legacy_path: v2-ui database file to read from.
    """

    db_path: Path
    legacy_path: Path


@dataclass
class MigrateResponse:
    """Response from a migration run."""

    success: bool
    imported: int = 0
    error: str | None = None

    @classmethod
    def create_error(cls, message: str) -> "MigrateResponse":
        return cls(success=False, imported=0, error=message)


class MigrateUseCase:
    """Use case behind the `v2-ui` command."""

    def __init__(
        self,
        store_initializer: StoreInitializer,
        legacy_source: LegacyInboundSource,
    ) -> None:
        self._store_initializer = store_initializer
        self._legacy_source = legacy_source

    def execute(
        self,
        request: MigrateRequest,
        progress: ProgressCallback | None = None,
    ) -> MigrateResponse:
        """Import every legacy inbound into the panel store.

        Args:
            request: Source and target paths.
            progress: Optional progress reporting.

        Returns:
            MigrateResponse with the number of imported inbounds, or the error.
        """
        try:
            store = self._store_initializer.init_store(request.db_path)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "migration")
            return MigrateResponse.create_error(format_error_message(e, "migration"))

        try:
            legacy_inbounds = self._legacy_source.read_inbounds(request.legacy_path)
            if not legacy_inbounds:
                logger.info("No inbounds found in %s", request.legacy_path)
                return MigrateResponse(success=True, imported=0)

            user = store.users.get_first()
            if user is None:
                return MigrateResponse.create_error("no user found in the store")

            if progress:
                progress.on_start(len(legacy_inbounds), "Converting inbounds")
            inbounds = []
            for i, inbound in enumerate(legacy_inbounds, start=1):
                inbounds.append(replace(inbound, user_id=user.id))
                if progress:
                    progress.on_progress(i, f"{inbound.protocol}:{inbound.port}")

            imported = store.inbounds.add_many(inbounds)
            logger.info("Imported %d inbounds from %s", imported, request.legacy_path)
            return MigrateResponse(success=True, imported=imported)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            log_use_case_error(e, "migration")
            return MigrateResponse.create_error(format_error_message(e, "migration"))
        finally:
            if progress:
                progress.on_complete()
            store.close()
