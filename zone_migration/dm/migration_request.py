from dataclasses import dataclass

from dataclasses_json import dataclass_json
from zone_migration.dm.os_disk import OS_TYPES, WINDOWS

ZONES = ["1", "2", "3"]


@dataclass_json
@dataclass
class MigrationRequest:
    subscription_id: str
    resource_group: str
    vm_name: str
    location: str
    zone: str
    os_type: str = WINDOWS
    cleanup_snapshots: bool = False
    cleanup_source_disks: bool = False

    def __post_init__(self):
        self.zone = str(self.zone)
        if self.zone not in ZONES:
            raise ValueError("Zone must be one of {}, got {}".format(", ".join(ZONES), self.zone))
        if self.os_type not in OS_TYPES:
            raise ValueError("OS type must be one of {}, got {}".format(", ".join(OS_TYPES), self.os_type))
