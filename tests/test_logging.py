import json
import logging
from unittest.mock import patch

from fleetdesk.logging import configure_logging


class TestConfigureLogging:
    def test_json_format(self):
        with patch("fleetdesk.logging.settings") as mock_settings:
            mock_settings.log_level = "INFO"
            mock_settings.log_json = True
            configure_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        from pythonjsonlogger.json import JsonFormatter

        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_text_format_and_level(self):
        with patch("fleetdesk.logging.settings") as mock_settings:
            mock_settings.log_level = "debug"
            mock_settings.log_json = False
            configure_logging()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert type(root.handlers[0].formatter) is logging.Formatter
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        with patch("fleetdesk.logging.settings") as mock_settings:
            mock_settings.log_level = "chatty"
            mock_settings.log_json = False
            configure_logging()

        assert logging.getLogger().level == logging.INFO

    def test_json_records_carry_service_name(self):
        with patch("fleetdesk.logging.settings") as mock_settings:
            mock_settings.log_level = "INFO"
            mock_settings.log_json = True
            configure_logging()

        formatter = logging.getLogger().handlers[0].formatter
        record = logging.LogRecord(
            "fleetdesk.test", logging.INFO, __file__, 1, "Load %s created", ("RNT-2026-001",), None
        )
        payload = json.loads(formatter.format(record))

        assert payload["service"] == "fleetdesk"
        assert payload["level"] == "INFO"
        assert payload["message"] == "Load RNT-2026-001 created"

    def test_pdf_font_subsetting_is_quiet(self):
        with patch("fleetdesk.logging.settings") as mock_settings:
            mock_settings.log_level = "DEBUG"
            mock_settings.log_json = False
            configure_logging()

        assert logging.getLogger("fontTools").level == logging.WARNING
