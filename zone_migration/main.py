import argparse
import sys

from zone_migration.cloud.cloud_factory import CloudFactory
from zone_migration.dm.migration_request import ZONES, MigrationRequest
from zone_migration.dm.os_disk import OS_TYPES, WINDOWS
from zone_migration.exceptions import LoggingSetupError
from zone_migration.logger import DEFAULT_LOG_PATH, DEFAULT_ROLLOVER_DAYS, start_logging
from zone_migration.service.migration_service import MigrationStatus, ZoneMigrationService
from zone_migration.utils import get_confirmation


def _non_negative_int(value):
    days = int(value)
    if days < 0:
        raise argparse.ArgumentTypeError("must be zero or more, got {}".format(value))
    return days


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zone-migration",
        description="Move an Azure VM and its managed disks into an availability zone of its region.")
    parser.add_argument("subscriptionId", help="Azure subscription ID", type=str)
    parser.add_argument("resourceGroup", help="Name of the resource group holding the VM and its disks", type=str)
    parser.add_argument("vmName", help="Name of the virtual machine to move", type=str)
    parser.add_argument("location", help="Region of the VM, used for the snapshots and new disks", type=str)
    parser.add_argument("zone", help="Target availability zone", choices=ZONES)
    parser.add_argument("--os-type", help="OS of the VM, selects how the OS disk is attached",
                        choices=OS_TYPES, default=WINDOWS)
    parser.add_argument("--cleanup-snapshots", help="Delete the snapshots once the new VM exists",
                        action="store_true")
    parser.add_argument("--cleanup-source-disks", help="Delete the original disks once the new VM exists",
                        action="store_true")
    parser.add_argument("--log-path", help="Log file to append to", default=DEFAULT_LOG_PATH)
    parser.add_argument("--log-rollover", help="Age in days after which the log file is rolled over",
                        type=_non_negative_int, default=DEFAULT_ROLLOVER_DAYS)
    parser.add_argument("--state-dir", help="Directory to write the JSON migration journal to", default=None)
    parser.add_argument("-y", "--yes", help="Do not ask for confirmation", action="store_true")
    parser.add_argument("-d", "--debug", help="Show debug output on the console", action="store_true")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        logger = start_logging(args.log_path, args.log_rollover, args.debug)
    except LoggingSetupError as e:
        print(e, file=sys.stderr)
        return MigrationStatus.FAILED.value

    request = MigrationRequest(
        subscription_id=args.subscriptionId,
        resource_group=args.resourceGroup,
        vm_name=args.vmName,
        location=args.location,
        zone=args.zone,
        os_type=args.os_type,
        cleanup_snapshots=args.cleanup_snapshots,
        cleanup_source_disks=args.cleanup_source_disks
    )

    print(f"Subscription ID: {request.subscription_id}")
    print(f"Resource Group Name: {request.resource_group}")
    print(f"VM Name: {request.vm_name}")
    print(f"Location: {request.location}")
    print(f"New Zone: {request.zone}")
    print(f"OS Type: {request.os_type}")
    print(f"Cleanup Snapshots: {request.cleanup_snapshots}")
    print(f"Cleanup Source Disks: {request.cleanup_source_disks}")
    print("The VM will be stopped and deleted, then recreated from zoned copies of its disks.")

    if not args.yes and not get_confirmation():
        logger.info("Migration of %s cancelled by operator", request.vm_name)
        print("Exiting")
        return MigrationStatus.FAILED.value

    cloud_factory: CloudFactory = CloudFactory(request.subscription_id)
    migration_service: ZoneMigrationService = ZoneMigrationService(
        request=request,
        cloud_factory=cloud_factory,
        assume_yes=args.yes,
        state_store=args.state_dir
    )

    result = migration_service.execute_migration()
    if result.status == MigrationStatus.PARTIAL:
        logger.warning("The migration of %s did not complete. Check %s for the failed phases.",
                       request.vm_name, args.log_path)

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
