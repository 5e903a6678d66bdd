from abc import ABC, abstractmethod
from enum import Enum

from zone_migration.dm.disk import Disk
from zone_migration.dm.network_interface import NetworkInterface
from zone_migration.dm.vm import VM
from zone_migration.dm.vm_config import VMConfig


class MigrationPossibilityCode(Enum):
    NODOUBT = 0
    IDOUBT = 1
    NOGO = 2


class MigrationPossibility:
    code: MigrationPossibilityCode
    reasons: list[str]

    def __init__(self, code: MigrationPossibilityCode, reasons: list[str]):
        self.code = code
        self.reasons = reasons


def evaluate_migration_possibility(vm: VM, zone: str) -> MigrationPossibility:
    """Decides whether the VM can be moved into the zone.

    NOGO when the VM is already there or has unmanaged disks (those cannot be
    snapshotted into managed disks); IDOUBT when a NIC carries a public IP,
    since a zonal public IP does not follow the VM into another zone.
    """
    code = MigrationPossibilityCode.NODOUBT
    reasons = []

    if vm.is_in_zone(zone):
        reasons.append("VM {} is already in zone {}. No migration needed.".format(vm.name, zone))
        return MigrationPossibility(MigrationPossibilityCode.NOGO, reasons)

    unmanaged = [disk.name for disk in vm.get_disks() if not disk.is_managed()]
    if unmanaged:
        reasons.append("VM {} has unmanaged disks ({}). Only managed disks can be migrated."
                       .format(vm.name, ", ".join(unmanaged)))
        return MigrationPossibility(MigrationPossibilityCode.NOGO, reasons)

    for network_interface in vm.network_profile.network_interfaces:
        if not network_interface.has_public_ip():
            continue
        code = MigrationPossibilityCode.IDOUBT
        for ip_config in network_interface.ip_configurations:
            if ip_config.public_ip_address_id is not None:
                reasons.append("The public IP {} on {} may be pinned to another zone and fail to attach to the new VM"
                               .format(ip_config.public_ip_address_id, network_interface.get_name()))

    return MigrationPossibility(code, reasons)


class ICloud(ABC):
    """Control-plane operations the migration needs from a cloud."""

    @abstractmethod
    def select_subscription(self, resource_group_name: str): pass

    @abstractmethod
    def get_vm(self, resource_group_name: str, vm_name: str) -> VM: pass

    @abstractmethod
    def stop_vm(self, resource_group_name: str, vm_name: str): pass

    @abstractmethod
    def delete_vm(self, resource_group_name: str, vm_name: str): pass

    @abstractmethod
    def get_disk(self, resource_group_name: str, disk_name: str) -> Disk: pass

    @abstractmethod
    def create_snapshot(self, resource_group_name: str, snapshot_name: str, source_disk_id: str,
                        location: str, sku: str) -> str:
        """Creates a snapshot of the disk and returns the snapshot id."""

    @abstractmethod
    def create_disk_from_snapshot(self, resource_group_name: str, disk_name: str, snapshot_id: str,
                                  location: str, zone: str, sku: str) -> str:
        """Creates a zone-pinned managed disk from the snapshot and returns its id."""

    @abstractmethod
    def delete_snapshot(self, resource_group_name: str, snapshot_name: str): pass

    @abstractmethod
    def delete_disk(self, resource_group_name: str, disk_name: str): pass

    @abstractmethod
    def get_network_interface(self, network_interface_id: str) -> NetworkInterface: pass

    @abstractmethod
    def create_vm(self, resource_group_name: str, vm_config: VMConfig) -> str:
        """Submits the VM definition and returns the id of the created VM."""
