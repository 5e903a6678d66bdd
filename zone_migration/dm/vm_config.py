from dataclasses import dataclass, field
from typing import List, Optional

from dataclasses_json import dataclass_json
from zone_migration.dm.network_interface import NetworkInterface

ATTACH = "Attach"


@dataclass_json
@dataclass
class DiskAttachment:
    name: str
    managed_disk_id: str
    create_option: str = ATTACH
    os_type: Optional[str] = None
    caching: Optional[str] = None
    lun: Optional[int] = None


@dataclass_json
@dataclass
class VMConfig:
    """Definition of the replacement VM, built before anything is submitted."""
    name: str
    vm_size: str
    location: str
    zone: str
    os_disk: Optional[DiskAttachment] = None
    data_disks: List[DiskAttachment] = field(default_factory=list)
    network_interfaces: List[NetworkInterface] = field(default_factory=list)

    def set_os_disk(self, name: str, managed_disk_id: str, os_type: str, caching: str = None):
        self.os_disk = DiskAttachment(name=name, managed_disk_id=managed_disk_id, os_type=os_type, caching=caching)

    def add_data_disk(self, name: str, managed_disk_id: str, lun: int, caching: str = None):
        for data_disk in self.data_disks:
            if data_disk.lun == lun:
                raise ValueError("LUN {} is already used by {}".format(lun, data_disk.name))
        self.data_disks.append(DiskAttachment(name=name, managed_disk_id=managed_disk_id, caching=caching, lun=lun))

    def add_network_interface(self, nic_id: str, primary: bool = False):
        if primary and any(nic.primary for nic in self.network_interfaces):
            raise ValueError("A primary network interface is already attached")
        self.network_interfaces.append(NetworkInterface(nic_id, primary))
