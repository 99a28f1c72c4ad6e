import logging
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level="INFO") -> logging.Logger:
    """Attach a stdout handler to the ``fishsim`` logger.

    Safe to call more than once: the handler is only added the first time,
    later calls just update the level.

    Args:
        level: A logging level name (``"DEBUG"``) or number.

    Returns:
        logging.Logger: The package logger.
    """
    logger = logging.getLogger("fishsim")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
