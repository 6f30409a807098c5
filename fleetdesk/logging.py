import logging
import sys

from fleetdesk.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that drown the application output below WARNING:
# uvicorn logs every request, fontTools logs each glyph subset of a receipt PDF.
NOISY_LOGGERS = ("uvicorn.access", "fontTools")


def configure_logging() -> None:
    """Send FleetDesk logs to stderr as text, or as JSON for the log shipper.

    Alembic's ``fileConfig`` replaces the root handlers while migrating, so the
    API calls ``reconfigure()`` again once the schema upgrade has run.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt=JSON_FORMAT,
                rename_fields={"asctime": "timestamp", "levelname": "level"},
                static_fields={"service": "fleetdesk"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


reconfigure = configure_logging
