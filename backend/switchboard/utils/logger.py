# switchboard/utils/logger.py

import logging
import sys

from switchboard.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(level: str = None) -> logging.Logger:
    """Configure the root logger once; repeated calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)

    if not any(getattr(h, "_switchboard", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._switchboard = True
        root.addHandler(handler)

    return root
