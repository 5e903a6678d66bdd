from dataclasses import dataclass
from typing import Optional

from dataclasses_json import dataclass_json

WINDOWS = "Windows"
LINUX = "Linux"
OS_TYPES = [WINDOWS, LINUX]


@dataclass_json
@dataclass
class OsDisk:
    """An OS disk as attached to the source VM.

    ``id`` is the managed disk resource id and is None for unmanaged (VHD) disks.
    ``sku`` is only known once the disk itself has been read.
    """
    name: str
    id: Optional[str]
    os_type: Optional[str] = None
    caching: Optional[str] = None
    disk_size_gb: Optional[int] = None
    sku: Optional[str] = None

    def is_managed(self) -> bool:
        return self.id is not None
