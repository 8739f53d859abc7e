# core/logging_config.py
import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "panchayath"
SECURITY_LOGGER_NAME = f"{LOGGER_NAME}.security"


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers in dev reload
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    return logger


logger = setup_logger()

# Scope violations are programming errors, kept apart from user-facing noise.
# Propagates to the parent handler.
security_logger = logging.getLogger(SECURITY_LOGGER_NAME)
