from dataclasses import dataclass, field
from typing import List, Optional

from dataclasses_json import dataclass_json
from zone_migration.dm.data_disk import DataDisk
from zone_migration.dm.network_profile import NetworkProfile
from zone_migration.dm.os_disk import OsDisk


@dataclass_json
@dataclass
class VM:
    id: str
    name: str
    resource_group: str
    location: str
    vm_size: str
    os_disk: OsDisk
    os_type: Optional[str] = None
    zones: List[str] = field(default_factory=list)
    data_disks: List[DataDisk] = field(default_factory=list)
    network_profile: NetworkProfile = field(default_factory=NetworkProfile)

    def get_disks(self) -> list:
        return [self.os_disk] + list(self.data_disks)

    def is_in_zone(self, zone: str) -> bool:
        return str(zone) in [str(z) for z in (self.zones or [])]
