"""
ACTIVITY TRACKING
=================
File logging for encryption and credential disclosure events.

FLOW:
- configure_security_logging() attaches a rotating file handler to the
  "security" logger tree at startup.

WHY:
- Plaintext fallbacks and integrity failures must leave a trace operators
  can audit.

HOW:
- Writes to SECURITY_LOG_FILE (default logs/security.log); empty disables.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler


def configure_security_logging() -> logging.Logger:
    logger = logging.getLogger("security")
    logger.setLevel(logging.INFO)
    path = os.getenv("SECURITY_LOG_FILE", "logs/security.log")
    if not path or any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=3)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
