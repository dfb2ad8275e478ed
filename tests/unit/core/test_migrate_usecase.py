"""Unit tests for MigrateUseCase."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tests.helpers.fakes import FailingStoreInitializer
from xpanel.adapters.sqlite import SqliteStoreInitializer
from xpanel.core.migration import MigrateRequest, MigrateResponse, MigrateUseCase
from xpanel.domain.entities import Inbound
from xpanel.domain.exceptions import MigrationError


def legacy_source(inbounds: list[Inbound] | None = None, error: Exception | None = None):
    source = MagicMock()
    if error is not None:
        source.read_inbounds.side_effect = error
    else:
        source.read_inbounds.return_value = inbounds or []
    return source


def legacy_inbound(port: int, protocol: str = "vmess") -> Inbound:
    return Inbound(user_id=0, port=port, protocol=protocol, tag=f"inbound-{port}")


@pytest.fixture
def request_for(tmp_path: Path):
    def make(db_path: Path) -> MigrateRequest:
        return MigrateRequest(db_path=db_path, legacy_path=tmp_path / "v2-ui.db")

    return make


class TestMigrateSuccess:
    """Tests for successful imports."""

    def test_imports_inbounds_for_admin_user(self, db_path: Path, request_for) -> None:
        """Every legacy inbound is stored under the administrative user."""
        source = legacy_source([legacy_inbound(10086), legacy_inbound(10087, "trojan")])
        usecase = MigrateUseCase(SqliteStoreInitializer(), source)

        response = usecase.execute(request_for(db_path))

        assert response.success
        assert response.imported == 2
        with SqliteStoreInitializer().init_store(db_path) as store:
            assert store.inbounds.count() == 2
            conn = store.inbounds._get_connection()
            rows = conn.execute(
                "SELECT user_id, port, tag FROM inbounds ORDER BY port"
            ).fetchall()
        assert rows == [(1, 10086, "inbound-10086"), (1, 10087, "inbound-10087")]

    def test_empty_legacy_store_imports_nothing(self, db_path: Path, request_for) -> None:
        usecase = MigrateUseCase(SqliteStoreInitializer(), legacy_source([]))

        response = usecase.execute(request_for(db_path))

        assert response.success
        assert response.imported == 0

    def test_reports_progress(self, db_path: Path, request_for) -> None:
        """Progress starts with the total, ticks per inbound, then completes."""
        source = legacy_source([legacy_inbound(1), legacy_inbound(2)])
        progress = MagicMock()

        MigrateUseCase(SqliteStoreInitializer(), source).execute(
            request_for(db_path), progress=progress
        )

        progress.on_start.assert_called_once_with(2, "Converting inbounds")
        assert progress.on_progress.call_count == 2
        progress.on_progress.assert_called_with(2, "vmess:2")
        progress.on_complete.assert_called_once()


class TestMigrateFailure:
    """Tests for failed imports."""

    def test_store_init_failure_skips_legacy_read(self, request_for) -> None:
        """The legacy store is not read when the panel store cannot be opened."""
        source = legacy_source([legacy_inbound(1)])

        response = MigrateUseCase(FailingStoreInitializer(), source).execute(
            request_for(Path("/nope/x-ui.db"))
        )

        assert not response.success
        assert "init database" in response.error
        source.read_inbounds.assert_not_called()

    def test_legacy_read_error_is_reported(self, db_path: Path, request_for) -> None:
        source = legacy_source(error=MigrationError("v2-ui database not found: /x"))

        response = MigrateUseCase(SqliteStoreInitializer(), source).execute(
            request_for(db_path)
        )

        assert not response.success
        assert response.error == "v2-ui database not found: /x"

    def test_port_clash_imports_nothing(self, db_path: Path, request_for) -> None:
        """A clash with an existing inbound rolls back the whole import."""
        initializer = SqliteStoreInitializer()
        with initializer.init_store(db_path) as store:
            store.inbounds.add_many([Inbound(user_id=1, port=443, protocol="vless")])

        source = legacy_source([legacy_inbound(8080), legacy_inbound(443)])
        response = MigrateUseCase(initializer, source).execute(request_for(db_path))

        assert not response.success
        assert response.error.startswith("database error: ")
        with initializer.init_store(db_path) as store:
            assert store.inbounds.count() == 1

    def test_no_user_is_an_error(self, request_for) -> None:
        store = MagicMock()
        store.users.get_first.return_value = None
        initializer = MagicMock()
        initializer.init_store.return_value = store

        response = MigrateUseCase(initializer, legacy_source([legacy_inbound(1)])).execute(
            request_for(Path("x.db"))
        )

        assert response == MigrateResponse.create_error("no user found in the store")
        store.inbounds.add_many.assert_not_called()
        store.close.assert_called_once()
