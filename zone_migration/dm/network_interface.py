from dataclasses import dataclass
from dataclasses_json import dataclass_json
from typing import List
from zone_migration.dm.network_interface_ip_configuration import NetworkInterfaceIPConfiguration


@dataclass_json
@dataclass
class NetworkInterface:
    id: str
    primary: bool
    ip_configurations: List[NetworkInterfaceIPConfiguration]

    def __init__(self, id: str, primary: bool = False,
                 ip_configurations: List[NetworkInterfaceIPConfiguration] = None):
        self.id = id
        self.primary = bool(primary)
        if ip_configurations is None:
            self.ip_configurations: List[NetworkInterfaceIPConfiguration] = []
        else:
            self.ip_configurations = ip_configurations

    def get_name(self) -> str:
        return self.id.rstrip('/').split('/')[-1]

    def has_public_ip(self) -> bool:
        return any(ip_config.public_ip_address_id is not None for ip_config in self.ip_configurations)
