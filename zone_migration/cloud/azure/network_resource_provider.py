import logging

from azure.core.credentials import TokenCredential
from azure.mgmt.network import NetworkManagementClient
from azure.mgmt.network.models import NetworkInterface

logger = logging.getLogger(__name__)


class NetworkResourceProvider:
    def __init__(self, subscription_id: str, credentials: TokenCredential, network_client: NetworkManagementClient = None):
        self.subscription_id = subscription_id
        self.network_client = network_client or NetworkManagementClient(credentials, subscription_id)

    def get_nic(self, resource_group_name: str, nic_name: str) -> NetworkInterface:
        logger.debug("GETting NIC: %s",
                     NetworkResourceProvider.get_network_interface_id(self.subscription_id, resource_group_name, nic_name))
        return self.network_client.network_interfaces.get(resource_group_name, nic_name)

    def get_nic_by_id(self, network_interface_id: str) -> NetworkInterface:
        return self.get_nic(NetworkResourceProvider.get_network_interface_resource_group_name(network_interface_id),
                            NetworkResourceProvider.get_network_interface_name(network_interface_id))

    @classmethod
    def get_network_interface_id(cls, subscription_id: str, resource_group_name: str, nic_name: str):
        return '/subscriptions/{}/resourceGroups/{}/providers/Microsoft.Network/networkInterfaces/{}'.format(
            subscription_id,
            resource_group_name,
            nic_name
        )

    @classmethod
    def get_network_interface_resource_group_name(cls, network_interface_id: str):
        parts = network_interface_id.split('/')
        if len(parts) < 9:
            raise ValueError("Not a network interface id: {}".format(network_interface_id))
        resource_group_name = parts[4]

        return resource_group_name

    @classmethod
    def get_network_interface_name(cls, network_interface_id: str):
        parts = network_interface_id.split('/')

        return parts[-1]
