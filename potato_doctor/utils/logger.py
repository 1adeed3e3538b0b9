"""Logger configuration module."""

import logging

LOGGER_NAME = "potato_doctor"


def setup_logger(level: str | int = logging.INFO) -> logging.Logger:
    """Set up and configure the package logger.

    Args:
        level (str | int): Logging level for the logger and its console handler.

    Returns:
        logging.Logger: Configured logger instance.
    """
    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(level)

    if _logger.handlers:
        for handler in _logger.handlers:
            handler.setLevel(level)
        return _logger

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    _logger.addHandler(console_handler)

    # Prevent propagation to avoid duplicate messages from parent loggers
    _logger.propagate = False

    return _logger


logger = setup_logger()
