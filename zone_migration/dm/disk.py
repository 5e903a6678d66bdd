from dataclasses import dataclass
from typing import Optional

from dataclasses_json import dataclass_json


@dataclass_json
@dataclass
class Disk:
    """A managed disk resource as it currently stands."""
    name: str
    id: str
    sku: Optional[str] = None
    disk_size_gb: Optional[int] = None


# snapshots are always zone-redundant so they survive the loss of the source zone
SNAPSHOT_SKU = "Standard_ZRS"
