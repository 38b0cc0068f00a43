"""
Central logging setup for termgreet.
Logs go to stderr so they never interleave with the rendered output on stdout;
an optional rotating file log can be added from the config.
"""

import logging
from logging.handlers import RotatingFileHandler

from termgreet.config import Config

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(cfg: Config, verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else cfg["logging"].get("level", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    log_file = cfg["logging"].get("file")
    if log_file:
        try:
            handler = RotatingFileHandler(
                log_file,
                maxBytes=int(cfg["logging"].get("rotate_bytes", 1024 * 1024)),
                backupCount=int(cfg["logging"].get("rotate_keep", 3)),
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Cannot open log file %s: %s", log_file, e)
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logging.getLogger().addHandler(handler)

    # Pillow logs every plugin it probes at DEBUG
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
