"""Tests for the command line entry point."""

from unittest.mock import patch

import pytest

from zone_migration.main import build_parser, main
from zone_migration.service.migration_service import MigrationStatus

ARGS = ["00000000-0000-0000-0000-000000000000", "rg", "MyVM", "eastus", "2"]


def test_parser_defaults():
    args = build_parser().parse_args(ARGS)

    assert args.zone == "2"
    assert args.os_type == "Windows"
    assert args.log_rollover == 5
    assert args.cleanup_snapshots is False
    assert args.cleanup_source_disks is False
    assert args.state_dir is None


@pytest.mark.parametrize("argv", [
    ARGS[:4] + ["4"],
    ARGS + ["--os-type", "Solaris"],
    ARGS + ["--log-rollover", "-1"],
    ARGS[:3],
])
def test_parser_rejects_invalid_arguments(argv):
    with pytest.raises(SystemExit) as e:
        build_parser().parse_args(argv)

    assert e.value.code == 2


@patch("zone_migration.main.CloudFactory")
@patch("zone_migration.main.ZoneMigrationService")
def test_main_runs_migration(service_cls, factory_cls, tmp_path):
    service_cls.return_value.execute_migration.return_value.status = MigrationStatus.SUCCEEDED
    service_cls.return_value.execute_migration.return_value.exit_code = 0

    code = main(ARGS + ["--yes", "--os-type", "Linux", "--cleanup-snapshots",
                        "--log-path", str(tmp_path / "run.log"), "--state-dir", str(tmp_path / "state")])

    assert code == 0
    factory_cls.assert_called_once_with(ARGS[0])
    kwargs = service_cls.call_args.kwargs
    request = kwargs["request"]
    assert (request.vm_name, request.zone, request.os_type) == ("MyVM", "2", "Linux")
    assert request.cleanup_snapshots is True
    assert request.cleanup_source_disks is False
    assert kwargs["assume_yes"] is True
    assert kwargs["state_store"] == str(tmp_path / "state")
    assert (tmp_path / "run.log").exists()


@patch("zone_migration.main.ZoneMigrationService")
def test_main_returns_partial_exit_code(service_cls, tmp_path):
    service_cls.return_value.execute_migration.return_value.status = MigrationStatus.PARTIAL
    service_cls.return_value.execute_migration.return_value.exit_code = 2

    assert main(ARGS + ["--yes", "--log-path", str(tmp_path / "run.log")]) == 2


@patch("zone_migration.main.get_confirmation", return_value=False)
@patch("zone_migration.main.ZoneMigrationService")
def test_main_declined_confirmation(service_cls, confirm, tmp_path):
    code = main(ARGS + ["--log-path", str(tmp_path / "run.log")])

    assert code == 1
    confirm.assert_called_once_with()
    service_cls.assert_not_called()


def test_main_unwritable_log(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")

    assert main(ARGS + ["--yes", "--log-path", str(blocker / "run.log")]) == 1
