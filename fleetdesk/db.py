import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine, make_url

from alembic import command
from fleetdesk.settings import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_connection: Connection | None = None


def engine_options(db_url: str) -> dict:
    """Pool options per backend.

    MySQL drops idle connections after ``wait_timeout``, so pooled ones are
    pinged and recycled. SQLite files are opened by a single worker and need
    none of that.
    """
    if make_url(db_url).get_backend_name() == "sqlite":
        return {}
    return {"pool_pre_ping": True, "pool_recycle": 1800}


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(settings.db_url, **engine_options(settings.db_url))
        if _engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(_engine)
        logger.info("Database engine created for %s", _engine.url.render_as_string(hide_password=True))
    return _engine


def get_connection() -> Connection:
    """Connection shared by the seed script and the repository factory.

    API requests never use it: DBConnectionMiddleware opens one per request.
    """
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("Shared DB connection opened")
    return _connection


def dispose_engine() -> None:
    """Close the shared connection and release every pooled connection."""
    global _engine, _connection
    if _connection is not None:
        _connection.close()
        _connection = None
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")


def _get_alembic_config() -> Config:
    # alembic.ini sits beside the package in a checkout and in the working
    # directory of the container image.
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    cfg = Config(ini_path)
    cfg.set_main_option("script_location", os.path.join(project_root, "alembic"))
    return cfg


def initialize_db() -> None:
    """Bring the FleetDesk schema up to the latest revision."""
    logger.info("Upgrading database schema")
    command.upgrade(_get_alembic_config(), "head")
    logger.info("Database schema is at head")
