# virtuoso/utils/logs.py
import datetime
import logging
import os
import traceback
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def log_dir(base: Optional[str] = None) -> str:
    d = os.path.join(base or os.getcwd(), "logs")
    os.makedirs(d, exist_ok=True)
    return d


def _new_log_path(prefix: str, base: Optional[str] = None) -> str:
    stamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    return os.path.join(log_dir(base), f"{prefix}-{stamp}.txt")


def init_logging(level: int = logging.INFO, base: Optional[str] = None):
    """Console logging plus a rotating app.log under logs/. Idempotent."""
    root = logging.getLogger()
    if root.handlers:
        return

    logging.basicConfig(level=level, format=LOG_FORMAT)
    fh = RotatingFileHandler(os.path.join(log_dir(base), "app.log"),
                             maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)


def log_exception(title: str, exc: BaseException, base: Optional[str] = None) -> str:
    """Write the traceback of exc to logs/error-<stamp>.txt and return the path."""
    path = _new_log_path("error", base)
    with open(path, "w", encoding="utf-8") as out:
        out.write(f"[{title}] {type(exc).__name__}: {exc}\n")
        out.write("Traceback:\n")
        out.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    logging.getLogger(__name__).error("%s: %s (details in %s)", title, exc, path)
    return path
