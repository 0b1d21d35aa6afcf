"""
Terminal display helpers — ANSI colour codes and the file logger used by
the command line entry point.
"""

import logging
import os
from datetime import datetime

# ANSI escape codes
LIGHT_BLUE = "\033[94m"     # line-number gutter
GRAY = "\033[90m"           # context lines
WHITE = "\033[97m"
RED = "\033[31m"
GREEN = "\033[92m"
CYAN = "\033[36m"
BOLD = "\033[1m"
RED_BG = "\033[41m"
GREEN_BG = "\033[48;5;34m"
RESET = "\033[0m"


def setup_logger(log_dir: str = ".linepatch/logs",
                 level: int = logging.DEBUG) -> logging.Logger:
    """Attach a timestamped file handler to the ``linepatch`` logger.

    Library code only logs through module loggers; this is called once by
    the CLI so that importing the package never touches the disk.
    """
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"linepatch_{timestamp}.log")

    logger = logging.getLogger("linepatch")
    logger.setLevel(level)

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(fh)

    return logger
