import uvicorn

from fleetdesk.db import initialize_db
from fleetdesk.logging import configure_logging
from fleetdesk.settings import settings


def main() -> None:
    configure_logging()
    initialize_db()
    uvicorn.run("web.app:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
