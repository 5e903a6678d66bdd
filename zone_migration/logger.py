import logging
import os
import sys
from datetime import datetime
from typing import Optional

from zone_migration.exceptions import LoggingSetupError

LOGGER_NAME = "zone_migration"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_PATH = "zone-migration.log"
DEFAULT_ROLLOVER_DAYS = 5

# SDK loggers that are chatty at INFO
NOISY_LOGGERS = [
    "azure.identity",
    "azure.core.pipeline.policies.http_logging_policy",
]


def get_log_started_at(log_path: str) -> Optional[datetime]:
    """Returns when the log file was started.

    The timestamp of the first entry is used; the file's modification time
    is the fallback for files that do not start with one.
    """
    if not os.path.exists(log_path):
        return None

    with open(log_path, "r", encoding="utf-8", errors="replace") as f:
        first_line = f.readline()
    try:
        return datetime.strptime(first_line[:19], TIMESTAMP_FORMAT)
    except ValueError:
        return datetime.fromtimestamp(os.path.getmtime(log_path))


def get_rollover_path(log_path: str, started_at: datetime) -> str:
    stem, ext = os.path.splitext(log_path)
    candidate = "{}_{}{}".format(stem, started_at.strftime("%Y%m%d"), ext or ".log")
    i = 1
    while os.path.exists(candidate):
        candidate = "{}_{}_{}{}".format(stem, started_at.strftime("%Y%m%d"), i, ext or ".log")
        i += 1

    return candidate


def rollover_log(log_path: str, rollover_days: int, now: datetime = None) -> Optional[str]:
    """Moves the log file aside when its first entry is older than rollover_days.

    Returns the dated path the log was moved to, or None when no rollover happened.
    """
    started_at = get_log_started_at(log_path)
    if started_at is None:
        return None

    now = now or datetime.now()
    if (now - started_at).days < rollover_days:
        return None

    rolled_path = get_rollover_path(log_path, started_at)
    os.rename(log_path, rolled_path)

    return rolled_path


def start_logging(log_path: str = DEFAULT_LOG_PATH, rollover_days: int = DEFAULT_ROLLOVER_DAYS,
                  debug_level: bool = False) -> logging.Logger:
    """Sets up console and file logging for a migration run.

    The file handler always records DEBUG; the console shows INFO unless
    debug_level is set.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    console_handler.setLevel(logging.DEBUG if debug_level else logging.INFO)
    logger.addHandler(console_handler)

    try:
        log_dir = os.path.dirname(os.path.abspath(log_path))
        os.makedirs(log_dir, exist_ok=True)
        rolled_path = rollover_log(log_path, rollover_days)
        file_handler = logging.FileHandler(filename=log_path, mode="a", encoding="utf-8")
    except OSError as e:
        raise LoggingSetupError("Unable to open log file {}: {}".format(log_path, e)) from e

    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)
    logger.setLevel(logging.DEBUG)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if rolled_path is not None:
        logger.info("Rolled previous log over to %s", rolled_path)

    return logger
