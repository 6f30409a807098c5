import os

from fleetdesk.settings import Settings


def _clear_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("FLEETDESK_"):
            monkeypatch.delenv(key, raising=False)


class TestSettings:
    def test_defaults(self, monkeypatch):
        _clear_env(monkeypatch)
        s = Settings(_env_file=None)
        assert s.db_url == "mysql+pymysql://fleetdesk:fleetdesk@db:3306/fleetdesk"
        assert s.port == 8000
        assert s.timezone == "Asia/Riyadh"
        assert s.currency == "SAR"
        assert s.api_token == ""

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FLEETDESK_DB_URL", "sqlite:///fleet.db")
        monkeypatch.setenv("FLEETDESK_LOG_JSON", "true")
        s = Settings(_env_file=None)
        assert s.db_url == "sqlite:///fleet.db"
        assert s.log_json is True

    def test_auth_disabled_without_token(self, monkeypatch):
        _clear_env(monkeypatch)
        assert Settings(_env_file=None).auth_enabled() is False

    def test_auth_enabled_with_token(self, monkeypatch):
        monkeypatch.setenv("FLEETDESK_API_TOKEN", "secret")
        assert Settings(_env_file=None).auth_enabled() is True
