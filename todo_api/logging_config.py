import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Send application, SQLAlchemy and uvicorn logs to stdout in one format"""
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout, level=level)
    # SQL echo is too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
