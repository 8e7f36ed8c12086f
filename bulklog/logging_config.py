"""Root logger bootstrap, called once by the application factory."""

import logging
import os
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
