"""Tests for log file setup and rollover."""

import logging
import os
import time
from datetime import datetime

import pytest

from zone_migration.exceptions import LoggingSetupError
from zone_migration.logger import get_log_started_at, rollover_log, start_logging


def _write_log(path, started_at):
    path.write_text("{},000 - zone_migration - INFO - first entry\n".format(started_at.strftime("%Y-%m-%d %H:%M:%S")))


def test_no_rollover_without_existing_log(tmp_path):
    assert rollover_log(str(tmp_path / "run.log"), 5) is None


def test_recent_log_is_kept(tmp_path):
    log = tmp_path / "run.log"
    _write_log(log, datetime(2024, 3, 8, 9, 0, 0))

    assert rollover_log(str(log), 5, now=datetime(2024, 3, 10)) is None
    assert log.exists()


def test_old_log_is_moved_to_dated_name(tmp_path):
    log = tmp_path / "run.log"
    _write_log(log, datetime(2024, 3, 1, 9, 0, 0))

    rolled = rollover_log(str(log), 5, now=datetime(2024, 3, 10))

    assert rolled == str(tmp_path / "run_20240301.log")
    assert not log.exists()
    assert "first entry" in (tmp_path / "run_20240301.log").read_text()


def test_rollover_does_not_overwrite_previous_rollover(tmp_path):
    log = tmp_path / "run.log"
    (tmp_path / "run_20240301.log").write_text("older\n")
    _write_log(log, datetime(2024, 3, 1, 9, 0, 0))

    rolled = rollover_log(str(log), 5, now=datetime(2024, 3, 10))

    assert rolled == str(tmp_path / "run_20240301_1.log")
    assert (tmp_path / "run_20240301.log").read_text() == "older\n"


def test_zero_days_always_rolls_over(tmp_path):
    log = tmp_path / "run.log"
    _write_log(log, datetime.now())

    assert rollover_log(str(log), 0) is not None


def test_age_falls_back_to_modification_time(tmp_path):
    log = tmp_path / "run.log"
    log.write_text("not a timestamp\n")
    old = time.mktime(datetime(2020, 1, 2, 3, 4, 5).timetuple())
    os.utime(str(log), (old, old))

    assert get_log_started_at(str(log)) == datetime(2020, 1, 2, 3, 4, 5)


def test_start_logging_appends_to_file(tmp_path):
    log = tmp_path / "logs" / "run.log"

    logger = start_logging(str(log), 5)
    logging.getLogger("zone_migration.service").info("phase done")
    logger.debug("debug detail")
    for handler in logger.handlers:
        handler.flush()

    content = log.read_text()
    assert " - zone_migration.service - INFO - phase done" in content
    assert "DEBUG - debug detail" in content
    assert logging.getLogger("azure.identity").level == logging.WARNING


def test_start_logging_console_level(tmp_path):
    logger = start_logging(str(tmp_path / "run.log"), 5, debug_level=False)
    console = [h for h in logger.handlers if not isinstance(h, logging.FileHandler)]

    assert [h.level for h in console] == [logging.INFO]


def test_start_logging_unwritable_path(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")

    with pytest.raises(LoggingSetupError):
        start_logging(str(blocker / "run.log"), 5)
