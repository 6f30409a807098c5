from unittest.mock import patch

from fleetdesk import db


class TestEngineOptions:
    def test_mysql_connections_are_pinged_and_recycled(self):
        options = db.engine_options("mysql+pymysql://fleetdesk:secret@db:3306/fleetdesk")
        assert options == {"pool_pre_ping": True, "pool_recycle": 1800}

    def test_sqlite_needs_no_pool_tuning(self):
        assert db.engine_options("sqlite:///fleetdesk.db") == {}


class TestEngineLifecycle:
    def test_sqlite_engine_enforces_foreign_keys(self, monkeypatch):
        monkeypatch.setattr(db.settings, "db_url", "sqlite://")
        monkeypatch.setattr(db, "_engine", None)
        monkeypatch.setattr(db, "_connection", None)
        try:
            conn = db.get_connection()
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar_one() == 1
            assert db.get_connection() is conn
        finally:
            db.dispose_engine()

        assert db._engine is None
        assert db._connection is None

    def test_dispose_without_engine_is_a_no_op(self, monkeypatch):
        monkeypatch.setattr(db, "_engine", None)
        monkeypatch.setattr(db, "_connection", None)
        db.dispose_engine()
        assert db._engine is None


class TestInitializeDb:
    def test_upgrades_to_head(self):
        with patch.object(db, "command") as mock_command:
            db.initialize_db()

        mock_command.upgrade.assert_called_once()
        cfg, revision = mock_command.upgrade.call_args.args
        assert revision == "head"
        assert cfg.get_main_option("script_location").endswith("alembic")
