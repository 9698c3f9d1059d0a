"""
Measurement error analysis for Partial Credit Model scoring.

Importing the package configures logging once: a stdout handler on the
root logger, with chatty third-party loggers raised to WARNING.
"""

import logging
import sys

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(formatter)

# Application loggers (named by __name__) propagate to the root logger
root_logger = logging.getLogger()
root_logger.setLevel(logging.DEBUG)
root_logger.addHandler(console_handler)

# numba logs every compilation pass at DEBUG
logging.getLogger("numba").setLevel(logging.WARNING)
