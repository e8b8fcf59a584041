"""Logger setup for the whchecker package.

Every module logs under the "whchecker" tree. The first get_logger() call
attaches one stream handler to that tree unless the host application has
already configured the root logger. Level comes from WHCHECKER_LOG_LEVEL.
"""

from __future__ import annotations

import logging
import os
from typing import Final

_ROOT_NAME: Final[str] = "whchecker"
_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_level() -> int:
    level_name = os.getenv("WHCHECKER_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_tree() -> logging.Logger:
    tree = logging.getLogger(_ROOT_NAME)
    if not tree.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        tree.addHandler(handler)
    tree.setLevel(_resolve_level())
    return tree


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; names outside the package are nested under "whchecker."."""
    _configure_tree()
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)
