import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from zone_migration.cloud.cloud import ICloud, MigrationPossibilityCode, evaluate_migration_possibility
from zone_migration.cloud.cloud_factory import CloudFactory
from zone_migration.dm.data_disk import DataDisk
from zone_migration.dm.disk import SNAPSHOT_SKU
from zone_migration.dm.migration_request import MigrationRequest
from zone_migration.dm.migration_state import MigrationState
from zone_migration.dm.os_disk import OsDisk
from zone_migration.dm.phase_result import MigrationPhase, OnFailure, PhaseResult
from zone_migration.dm.vm import VM
from zone_migration.dm.vm_config import VMConfig
from zone_migration.exceptions import MigrationNotPossibleError, ZoneMigrationError
from zone_migration.service.naming import get_snapshot_name, get_zoned_disk_name
from zone_migration.utils import Stopwatch, get_confirmation

logger = logging.getLogger(__name__)

# phases in the order they run, with what happens to the run when one fails
PHASES = [
    (MigrationPhase.SELECT_SUBSCRIPTION, OnFailure.ABORT),
    (MigrationPhase.READ_SOURCE_VM, OnFailure.ABORT),
    (MigrationPhase.EVALUATE, OnFailure.ABORT),
    (MigrationPhase.STOP_SOURCE_VM, OnFailure.HALT),
    (MigrationPhase.MIGRATE_OS_DISK, OnFailure.HALT),
    (MigrationPhase.MIGRATE_DATA_DISKS, OnFailure.HALT),
    (MigrationPhase.DELETE_SOURCE_VM, OnFailure.HALT),
    (MigrationPhase.BUILD_VM_CONFIG, OnFailure.HALT),
    (MigrationPhase.ATTACH_NETWORK_INTERFACES, OnFailure.CONTINUE),
    (MigrationPhase.CREATE_VM, OnFailure.HALT),
    (MigrationPhase.CLEANUP_SNAPSHOTS, OnFailure.CONTINUE),
    (MigrationPhase.CLEANUP_SOURCE_DISKS, OnFailure.CONTINUE),
]


class MigrationStatus(Enum):
    SUCCEEDED = 0
    FAILED = 1
    PARTIAL = 2


@dataclass
class RunContext:
    """Everything a migration run reads and produces, handed from phase to phase."""
    request: MigrationRequest
    state: MigrationState
    stopwatch: Stopwatch
    cloud: Optional[ICloud] = None
    source_vm: Optional[VM] = None
    vm_config: Optional[VMConfig] = None
    new_vm_id: Optional[str] = None


@dataclass
class MigrationResult:
    status: MigrationStatus
    state: MigrationState
    results: List[PhaseResult] = field(default_factory=list)
    new_vm_id: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return self.status.value

    def get_failures(self) -> Dict[MigrationPhase, str]:
        return {result.phase: result.reason for result in self.results if not result.succeeded}


class ZoneMigrationService:
    request: MigrationRequest
    cloud_factory: CloudFactory
    assume_yes: bool
    state_store: Optional[str]

    def __init__(self,
                 request: MigrationRequest,
                 cloud_factory: CloudFactory,
                 assume_yes: bool = False,
                 state_store: str = None,
                 confirm: Callable[[str], bool] = get_confirmation):
        self.request = request
        self.cloud_factory = cloud_factory
        self.assume_yes = assume_yes
        self.state_store = state_store
        self.confirm = confirm
        self._handlers = {
            MigrationPhase.SELECT_SUBSCRIPTION: self._select_subscription,
            MigrationPhase.READ_SOURCE_VM: self._read_source_vm,
            MigrationPhase.EVALUATE: self._evaluate,
            MigrationPhase.STOP_SOURCE_VM: self._stop_source_vm,
            MigrationPhase.MIGRATE_OS_DISK: self._migrate_os_disk,
            MigrationPhase.MIGRATE_DATA_DISKS: self._migrate_data_disks,
            MigrationPhase.DELETE_SOURCE_VM: self._delete_source_vm,
            MigrationPhase.BUILD_VM_CONFIG: self._build_vm_config,
            MigrationPhase.ATTACH_NETWORK_INTERFACES: self._attach_network_interfaces,
            MigrationPhase.CREATE_VM: self._create_vm,
            MigrationPhase.CLEANUP_SNAPSHOTS: self._cleanup_snapshots,
            MigrationPhase.CLEANUP_SOURCE_DISKS: self._cleanup_source_disks,
        }

    def get_planned_phases(self):
        planned = []
        for phase, on_failure in PHASES:
            if phase == MigrationPhase.CLEANUP_SNAPSHOTS and not self.request.cleanup_snapshots:
                continue
            if phase == MigrationPhase.CLEANUP_SOURCE_DISKS and not self.request.cleanup_source_disks:
                continue
            planned.append((phase, on_failure))

        return planned

    def execute_migration(self) -> MigrationResult:
        request = self.request
        context = RunContext(
            request=request,
            state=MigrationState.init_for_run(request.vm_name, request.zone),
            stopwatch=Stopwatch()
        )
        results = []
        status = MigrationStatus.SUCCEEDED

        logger.info("Migrating VM %s in %s to zone %s of %s (run %s)",
                    request.vm_name, request.resource_group, request.zone, request.location, context.state.id)

        for phase, on_failure in self.get_planned_phases():
            result = self._run_phase(context, phase)
            results.append(result)
            if result.succeeded:
                continue

            if on_failure == OnFailure.ABORT:
                logger.error("Migration of %s aborted during %s: %s", request.vm_name, phase.value, result.reason)
                status = MigrationStatus.FAILED
                break

            status = MigrationStatus.PARTIAL
            if on_failure == OnFailure.HALT:
                logger.error("Migration of %s halted during %s. Completed phases: %s",
                             request.vm_name, phase.value, ", ".join(context.state.completed_phases))
                break

        self._log_summary(context, status)

        return MigrationResult(status, context.state, results, context.new_vm_id)

    def _run_phase(self, context: RunContext, phase: MigrationPhase) -> PhaseResult:
        logger.info("Starting phase %s", phase.value)
        context.stopwatch.lap()
        try:
            result = self._handlers[phase](context) or PhaseResult.success(phase)
        except ZoneMigrationError as e:
            result = PhaseResult.failure(phase, str(e))

        if result.succeeded:
            context.state.record_completed(phase.value)
            logger.info("Phase %s completed in %.1fs", phase.value, context.stopwatch.lap())
        else:
            context.state.record_failure(phase.value, result.reason)
            logger.warning("Phase %s failed after %.1fs: %s", phase.value, context.stopwatch.lap(), result.reason)
        self._commit_state(context)

        return result

    def _commit_state(self, context: RunContext):
        if self.state_store is None:
            return
        try:
            context.state.commit(self.state_store)
        except OSError as e:
            logger.warning("Could not write migration state to %s: %s", self.state_store, e)

    def _log_summary(self, context: RunContext, status: MigrationStatus):
        logger.info("Migration of %s finished with status %s in %.1fs",
                    self.request.vm_name, status.name, context.stopwatch.elapsed())
        logger.info("Completed phases: %s", ", ".join(context.state.completed_phases) or "none")
        for phase, reason in context.state.failures.items():
            logger.warning("Failed phase %s: %s", phase, reason)

    # phases

    def _select_subscription(self, context: RunContext):
        context.cloud = self.cloud_factory.get_cloud()
        context.cloud.select_subscription(self.request.resource_group)
        logger.info("Using subscription %s", self.request.subscription_id)

    def _read_source_vm(self, context: RunContext):
        vm = context.cloud.get_vm(self.request.resource_group, self.request.vm_name)
        context.source_vm = vm

        logger.info("VM %s (%s) in %s, zones %s", vm.name, vm.vm_size, vm.location, vm.zones or "none")
        logger.info("OS Disk Name: %s, Resource ID: %s", vm.os_disk.name, vm.os_disk.id)
        for disk in vm.data_disks:
            logger.info("Data Disk Name: %s, LUN: %s, Caching: %s, Resource ID: %s", disk.name, disk.lun, disk.caching, disk.id)
        for network_interface in vm.network_profile.network_interfaces:
            logger.info("Network Interface: %s, Primary: %s", network_interface.id, network_interface.primary)

        if vm.os_type is not None and vm.os_type.lower() != self.request.os_type.lower():
            logger.warning("VM %s reports OS type %s but %s was requested; the OS disk will be attached as %s",
                           vm.name, vm.os_type, self.request.os_type, self.request.os_type)

    def _evaluate(self, context: RunContext):
        vm = context.source_vm
        if _normalize_location(vm.location) != _normalize_location(self.request.location):
            raise MigrationNotPossibleError("VM {} is in {}, not {}. Only moves within a region are supported."
                                            .format(vm.name, vm.location, self.request.location))

        possibility = evaluate_migration_possibility(vm, self.request.zone)
        reasons = ""
        for i, reason in enumerate(possibility.reasons, start=1):
            reasons += "{}. {}\n".format(i, reason)

        if possibility.code == MigrationPossibilityCode.NOGO:
            raise MigrationNotPossibleError("Migration cannot be done for the following reasons:\n{}".format(reasons))

        if possibility.code == MigrationPossibilityCode.IDOUBT:
            logger.warning("Migration may not fully succeed:\n%s", reasons)
            if not self.assume_yes and not self.confirm("Do you still wish to go ahead (y/n)? "):
                raise MigrationNotPossibleError("Migration declined by operator")

    def _stop_source_vm(self, context: RunContext):
        logger.info("Stopping VM %s", self.request.vm_name)
        context.cloud.stop_vm(self.request.resource_group, self.request.vm_name)

    def _migrate_os_disk(self, context: RunContext):
        self._migrate_disk(context, context.source_vm.os_disk)

    def _migrate_data_disks(self, context: RunContext):
        # the first failing disk stops the loop
        for disk in context.source_vm.data_disks:
            self._migrate_disk(context, disk)

    def _migrate_disk(self, context: RunContext, disk: Union[OsDisk, DataDisk]):
        request = self.request
        cloud = context.cloud

        details = cloud.get_disk(request.resource_group, disk.name)
        disk.sku = details.sku or disk.sku
        disk.disk_size_gb = details.disk_size_gb or disk.disk_size_gb

        snapshot_name = get_snapshot_name(disk.name)
        logger.info("Creating snapshot %s of %s", snapshot_name, disk.name)
        snapshot_id = cloud.create_snapshot(request.resource_group, snapshot_name, details.id,
                                            request.location, SNAPSHOT_SKU)
        context.state.snapshots[disk.name] = snapshot_id
        self._commit_state(context)

        zoned_disk_name = get_zoned_disk_name(disk.name, request.zone)
        logger.info("Creating disk %s (%s) in zone %s from %s", zoned_disk_name, disk.sku, request.zone, snapshot_name)
        zoned_disk_id = cloud.create_disk_from_snapshot(request.resource_group, zoned_disk_name, snapshot_id,
                                                        request.location, request.zone, disk.sku)
        context.state.zoned_disks[disk.name] = zoned_disk_id
        self._commit_state(context)

    def _delete_source_vm(self, context: RunContext):
        logger.info("Deleting VM %s; its disks are kept", self.request.vm_name)
        context.cloud.delete_vm(self.request.resource_group, self.request.vm_name)

    def _build_vm_config(self, context: RunContext):
        request = self.request
        vm = context.source_vm
        vm_config = VMConfig(name=vm.name, vm_size=vm.vm_size, location=request.location, zone=request.zone)

        os_disk = context.cloud.get_disk(request.resource_group, get_zoned_disk_name(vm.os_disk.name, request.zone))
        vm_config.set_os_disk(os_disk.name, os_disk.id, request.os_type, vm.os_disk.caching)

        for data_disk in vm.data_disks:
            zoned_disk = context.cloud.get_disk(request.resource_group, get_zoned_disk_name(data_disk.name, request.zone))
            try:
                vm_config.add_data_disk(zoned_disk.name, zoned_disk.id, data_disk.lun, data_disk.caching)
            except ValueError as e:
                raise ZoneMigrationError(str(e)) from e
            logger.info("Attached %s at LUN %s with caching %s", zoned_disk.name, data_disk.lun, data_disk.caching)

        context.vm_config = vm_config

    def _attach_network_interfaces(self, context: RunContext):
        failures = []
        for network_interface in context.source_vm.network_profile.network_interfaces:
            try:
                current = context.cloud.get_network_interface(network_interface.id)
                context.vm_config.add_network_interface(current.id, network_interface.primary)
                logger.info("Attached network interface %s (primary: %s)", current.id, network_interface.primary)
            except (ZoneMigrationError, ValueError) as e:
                logger.warning("Could not attach network interface %s: %s", network_interface.id, e)
                failures.append("{}: {}".format(network_interface.get_name(), e))

        if failures:
            return PhaseResult.failure(MigrationPhase.ATTACH_NETWORK_INTERFACES, "; ".join(failures))

    def _create_vm(self, context: RunContext):
        vm_config = context.vm_config
        logger.info("Creating VM %s (%s) in zone %s of %s with %d data disks and %d network interfaces",
                    vm_config.name, vm_config.vm_size, vm_config.zone, vm_config.location,
                    len(vm_config.data_disks), len(vm_config.network_interfaces))
        context.new_vm_id = context.cloud.create_vm(self.request.resource_group, vm_config)
        logger.info("Created VM %s", context.new_vm_id)

    def _cleanup_snapshots(self, context: RunContext):
        for disk in context.source_vm.get_disks():
            snapshot_name = get_snapshot_name(disk.name)
            logger.info("Deleting snapshot %s", snapshot_name)
            context.cloud.delete_snapshot(self.request.resource_group, snapshot_name)

    def _cleanup_source_disks(self, context: RunContext):
        for disk in context.source_vm.get_disks():
            logger.info("Deleting source disk %s", disk.name)
            context.cloud.delete_disk(self.request.resource_group, disk.name)


def _normalize_location(location: str) -> str:
    return (location or "").replace(" ", "").lower()
