from dataclasses import dataclass
from typing import Optional

from dataclasses_json import dataclass_json


@dataclass_json
@dataclass
class DataDisk:
    name: str
    id: Optional[str]
    lun: int
    caching: Optional[str] = None
    disk_size_gb: Optional[int] = None
    sku: Optional[str] = None

    def is_managed(self) -> bool:
        return self.id is not None
