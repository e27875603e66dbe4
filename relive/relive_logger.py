import logging
import sys

from relive.config import settings

logger = logging.getLogger("relive")

formatter = logging.Formatter(
    fmt = "%(asctime)s - %(levelname)s -  %(name)s - %(message)s"
)

stream_handler = logging.StreamHandler(sys.stdout)
stream_handler.setFormatter(formatter)
logger.handlers = [stream_handler]

if settings.LOG_FILE:
    file_handler = logging.FileHandler(settings.LOG_FILE)
    file_handler.setFormatter(formatter)
    logger.handlers.append(file_handler)

logger.setLevel(settings.LOG_LEVEL.upper())

logger.info("Logger initialized")
