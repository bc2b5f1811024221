from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from .settings import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def configure_logging(level: str | None = None, *, log_to_file: bool = True) -> None:
    """Configure root logging for the blockpad service.

    Logs go to stderr (stdout carries JSON-RPC frames) and, unless disabled,
    to a rotating file under the data directory. Calling this more than once
    only adjusts the level.
    """
    global _configured

    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    if _configured:
        return

    formatter = logging.Formatter(_FORMAT)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_to_file:
        try:
            settings.log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                settings.log_path,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            root.warning("File logging disabled (%s): %s", settings.log_path, e)
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
