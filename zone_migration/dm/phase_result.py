from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MigrationPhase(Enum):
    SELECT_SUBSCRIPTION = "select_subscription"
    READ_SOURCE_VM = "read_source_vm"
    EVALUATE = "evaluate"
    STOP_SOURCE_VM = "stop_source_vm"
    MIGRATE_OS_DISK = "migrate_os_disk"
    MIGRATE_DATA_DISKS = "migrate_data_disks"
    DELETE_SOURCE_VM = "delete_source_vm"
    BUILD_VM_CONFIG = "build_vm_config"
    ATTACH_NETWORK_INTERFACES = "attach_network_interfaces"
    CREATE_VM = "create_vm"
    CLEANUP_SNAPSHOTS = "cleanup_snapshots"
    CLEANUP_SOURCE_DISKS = "cleanup_source_disks"


class OnFailure(Enum):
    # nothing in the cloud has changed yet
    ABORT = 0
    # destructive work has started, later phases depend on this one
    HALT = 1
    # record the failure and go on with the next phase
    CONTINUE = 2


@dataclass
class PhaseResult:
    phase: MigrationPhase
    succeeded: bool
    reason: Optional[str] = None

    @classmethod
    def success(cls, phase: MigrationPhase):
        return PhaseResult(phase, True)

    @classmethod
    def failure(cls, phase: MigrationPhase, reason: str):
        return PhaseResult(phase, False, reason)
