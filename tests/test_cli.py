from datetime import timedelta

from click.testing import CliRunner

from app import cli as cli_module
from app.core.db import utcnow
from app.db.repositories.anonymous_user_repository import AnonymousUserRepository
from app.db.repositories.user_repository import UserRepository


class TestCleanupCommand:
    """Команда очистки заброшенных анонимов"""

    async def test_run_cleanup_removes_stale_users(self, session_factory, make_user):
        stale, _ = await make_user(anonymous=True)
        fresh, _ = await make_user(anonymous=True)
        async with session_factory() as session:
            await AnonymousUserRepository(session).update_fields(
                stale.id, last_activity=utcnow() - timedelta(days=10)
            )

        assert await cli_module.run_cleanup(session_factory, older_than_days=7) == 1

        async with session_factory() as session:
            assert await UserRepository(session).get_by_id(stale.id) is None
            assert await UserRepository(session).get_by_id(fresh.id) is not None

    def test_command_passes_days_and_reports(self, monkeypatch):
        calls = []

        async def fake_run_cleanup(session_factory, older_than_days):
            calls.append(older_than_days)
            return 3

        monkeypatch.setattr(cli_module, "run_cleanup", fake_run_cleanup)

        result = CliRunner().invoke(cli_module.cli, ["cleanup-anonymous", "--days", "14"])

        assert result.exit_code == 0
        assert "Deleted 3 abandoned anonymous users" in result.output
        assert calls == [14]

    def test_command_rejects_non_positive_days(self):
        result = CliRunner().invoke(cli_module.cli, ["cleanup-anonymous", "--days", "0"])

        assert result.exit_code != 0
