import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from farmbooks.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: Path | None = None):
    """
    Configures logging for the API and the bill import commands.

    Records go to a daily rotating file under LOG_DIR and to stdout. PyPDF2's
    own logger is held at PDF_LOG_LEVEL so its per-page warnings about
    malformed bill PDFs do not drown out the import log.
    """
    log_dir = Path(log_dir or settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / settings.LOG_FILE_NAME

    # Same format for the file and the console
    formatter = logging.Formatter(LOG_FORMAT)

    # Rotate at midnight, keeping LOG_BACKUP_DAYS of history
    # This will create files like farmbooks.log.2025-06-19
    file_handler = TimedRotatingFileHandler(
        log_file, when="midnight", interval=1, backupCount=settings.LOG_BACKUP_DAYS
    )
    file_handler.setFormatter(formatter)

    # Also print to the console so CLI runs show progress
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    # Get the root logger and set the application level
    logger = logging.getLogger()
    logger.setLevel(settings.LOG_LEVEL.upper())

    # Avoid adding handlers multiple times if this function is called more than once
    if not logger.handlers:
        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)
    else:
        file_handler.close()

    logging.getLogger("PyPDF2").setLevel(settings.PDF_LOG_LEVEL.upper())

    logging.info(f"Logging configured ({log_file}).")
