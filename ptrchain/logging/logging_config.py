import logging
import os
from datetime import datetime
from typing import Optional


def setup_logging(
    log_dir: Optional[str] = "logs", log_level: int = logging.DEBUG
) -> logging.Logger:
    """
    Initialize logging configuration.

    Args:
        log_dir (Optional[str]): Directory to store log files, None logs to the console only.
        log_level (int): Logging level.

    Returns:
        logging.Logger: Configured logger.
    """
    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Drop handlers from an earlier call
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    log_path = None
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        log_filename = datetime.now().strftime("ptrchain_%Y%m%d_%H%M%S.log")
        log_path = os.path.join(log_dir, log_filename)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_path:
        logger.debug(f"Logging initialized. Log file at {log_path}")
    return logger
