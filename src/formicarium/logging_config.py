from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[str] = None,
    include_uvicorn: bool = True,
    extra_loggers: Iterable[str] = (),
) -> logging.Logger:
    """Configure root logging once for the server and the headless runner.

    The level comes from ``level``, then the ``FORMICARIUM_LOG_LEVEL``
    environment variable, then INFO.
    """
    resolved = (level or os.getenv("FORMICARIUM_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=resolved, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    app_logger = logging.getLogger("formicarium")
    app_logger.setLevel(resolved)
    names = list(extra_loggers)
    if include_uvicorn:
        names.extend(("uvicorn", "uvicorn.error", "uvicorn.access"))
    for name in names:
        logging.getLogger(name).setLevel(resolved)
    return app_logger
