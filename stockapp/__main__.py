import argparse
import logging
import sys

import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from stockapp.config import get_settings
from stockapp.core.logging import setup_logging
from stockapp.main import create_app

logger = logging.getLogger("stockapp")


def parse_args(argv=None):
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the stock inventory HTTP service.")
    parser.add_argument("--host", default=settings.HOST, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port to listen on.")
    return parser.parse_args(argv)


def main(argv=None):
    settings = get_settings()
    setup_logging(settings)
    args = parse_args(argv)

    try:
        app = create_app(settings)
    except SQLAlchemyError as exc:
        logger.critical(
            "Failed to connect to the database",
            extra={"error": str(exc)},
        )
        sys.exit(1)

    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
