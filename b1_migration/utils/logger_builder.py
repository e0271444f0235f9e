# utils/logger_builder.py

import logging
import os
from datetime import datetime

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Shared logger for every module; handlers are attached once by build_logger()
global_logger = logging.getLogger("je_batch")
global_logger.setLevel(logging.INFO)


def build_logger(module_name: str = "je_batch", log_dir: str | None = None, with_start_end: bool = True) -> logging.Logger:
    """
    Attach a timestamped file output and a console output to the named logger.

    Args:
        module_name (str): Name of the logger (also used in the log file name)
        log_dir (str): Directory for log files, defaults to LOG_DIR or "logs"
        with_start_end (bool): Whether to log an automatic start message

    Returns:
        logging.Logger: Configured logger
    """
    log_dir = log_dir or os.getenv("LOG_DIR", "logs")
    logger = logging.getLogger(module_name)
    logger.setLevel(logging.INFO)

    if not logger.handlers:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = os.path.join(log_dir, f"{module_name}_{timestamp}.log")

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

        file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setStream(open(1, "w", encoding="utf-8", closefd=False))  # ensure emoji works in Windows terminal
        logger.addHandler(console_handler)

        if with_start_end:
            logger.info(f"🚀 Start of {module_name} run")

    return logger
