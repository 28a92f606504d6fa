from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

_APP_LOGGER = "planeview"
_PACKAGE_LOGGERS = ("view_core", "view_ui")
_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"

_CONFIGURED = False
_HANDLER: Optional[logging.Handler] = None


def _loggers(base_dir: Optional[Path]) -> List[logging.Logger]:
    if base_dir is None:
        names = (_APP_LOGGER,) + _PACKAGE_LOGGERS
    else:
        names = (f"{_APP_LOGGER}.test",)
    return [logging.getLogger(name) for name in names]


def configure_logging(
    base_dir: Optional[Path] = None, level: int = logging.INFO
) -> Dict[str, str]:
    """Attach a key/value file handler; repeated calls are no-ops.

    With ``base_dir`` (tests), only the ``planeview.test`` logger is wired so
    the process-wide loggers stay untouched.
    """
    global _CONFIGURED, _HANDLER
    root = base_dir or Path("data/roaming")
    log_dir = root / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "planeview.log"

    loggers = _loggers(base_dir)
    for logger in loggers:
        logger.setLevel(level)
        logger.propagate = False

    if base_dir is None and not _CONFIGURED:
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT))
        for logger in loggers:
            logger.addHandler(handler)
        _HANDLER = handler
        _CONFIGURED = True
    elif base_dir is not None and not loggers[0].handlers:
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT))
        loggers[0].addHandler(handler)

    return {
        "log_path": str(log_path),
        "format": "kv",
        "handlers": "file",
        "logger_name": loggers[0].name,
    }


def get_logger() -> logging.Logger:
    return logging.getLogger(_APP_LOGGER)
