import logging

from azure.core.credentials import TokenCredential
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.compute.models import Disk, Snapshot, VirtualMachine

logger = logging.getLogger(__name__)


class ComputeResourceProvider:
    subscription_id: str
    compute_client: ComputeManagementClient

    def __init__(self, subscription_id: str, credentials: TokenCredential, compute_client: ComputeManagementClient = None):
        self.subscription_id = subscription_id
        self.compute_client = compute_client or ComputeManagementClient(credentials, subscription_id)

    def get_vm(self, resource_group_name: str, vm_name: str) -> VirtualMachine:
        logger.debug("GETting VM: /subscriptions/%s/resourceGroups/%s/providers/Microsoft.Compute/virtualMachines/%s",
                     self.subscription_id, resource_group_name, vm_name)
        return self.compute_client.virtual_machines.get(resource_group_name, vm_name)

    def put_vm(self, resource_group_name: str, vm_name: str, vm: VirtualMachine) -> VirtualMachine:
        logger.debug("PUTting VM %s: %s", vm_name, vm)
        poller = self.compute_client.virtual_machines.begin_create_or_update(resource_group_name, vm_name, vm)
        result = poller.result()
        logger.debug("VM PUT Done")

        return result

    def power_off_vm(self, resource_group_name: str, vm_name: str):
        logger.debug("Powering off VM %s/%s without shutdown", resource_group_name, vm_name)
        poller = self.compute_client.virtual_machines.begin_power_off(resource_group_name, vm_name, skip_shutdown=True)
        poller.result()

    def delete_vm(self, resource_group_name: str, vm_name: str):
        logger.debug("DELETEing VM %s/%s", resource_group_name, vm_name)
        poller = self.compute_client.virtual_machines.begin_delete(resource_group_name, vm_name)
        poller.result()

    def get_disk(self, resource_group_name: str, disk_name: str) -> Disk:
        logger.debug("GETting disk %s/%s", resource_group_name, disk_name)
        return self.compute_client.disks.get(resource_group_name, disk_name)

    def put_disk(self, resource_group_name: str, disk_name: str, disk: Disk) -> Disk:
        logger.debug("PUTting disk %s: %s", disk_name, disk)
        poller = self.compute_client.disks.begin_create_or_update(resource_group_name, disk_name, disk)

        return poller.result()

    def delete_disk(self, resource_group_name: str, disk_name: str):
        logger.debug("DELETEing disk %s/%s", resource_group_name, disk_name)
        poller = self.compute_client.disks.begin_delete(resource_group_name, disk_name)
        poller.result()

    def put_snapshot(self, resource_group_name: str, snapshot_name: str, snapshot: Snapshot) -> Snapshot:
        logger.debug("PUTting snapshot %s: %s", snapshot_name, snapshot)
        poller = self.compute_client.snapshots.begin_create_or_update(resource_group_name, snapshot_name, snapshot)

        return poller.result()

    def delete_snapshot(self, resource_group_name: str, snapshot_name: str):
        logger.debug("DELETEing snapshot %s/%s", resource_group_name, snapshot_name)
        poller = self.compute_client.snapshots.begin_delete(resource_group_name, snapshot_name)
        poller.result()
