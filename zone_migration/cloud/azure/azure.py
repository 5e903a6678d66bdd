from contextlib import contextmanager

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.mgmt.compute.models import (
    VirtualMachine,
    HardwareProfile,
    StorageProfile,
    OSDisk,
    ManagedDiskParameters,
    NetworkProfile as AzureNetworkProfile,
    DataDisk as AzureDataDisk,
    NetworkInterfaceReference as AzureNetworkInterfaceReference,
    Disk as AzureDisk,
    DiskSku,
    Snapshot as AzureSnapshot,
    SnapshotSku,
    CreationData
)
from zone_migration.cloud.azure.compute_resource_provider import ComputeResourceProvider
from zone_migration.cloud.azure.network_resource_provider import NetworkResourceProvider
from zone_migration.cloud.azure.resource_provider import ResourceProvider
from zone_migration.cloud.cloud import ICloud
from zone_migration.dm.data_disk import DataDisk
from zone_migration.dm.disk import Disk, SNAPSHOT_SKU
from zone_migration.dm.network_interface import NetworkInterface
from zone_migration.dm.network_interface_ip_configuration import NetworkInterfaceIPConfiguration
from zone_migration.dm.os_disk import OsDisk
from zone_migration.dm.vm import VM
from zone_migration.dm.vm_config import VMConfig
from zone_migration.exceptions import CloudOperationError, SourceVMNotFoundError

COPY = "Copy"


def _enum_value(value):
    # the SDK hands back either plain strings or str-based enums
    return getattr(value, "value", value)


@contextmanager
def _cloud_operation(operation: str, resource: str):
    try:
        yield
    except (AzureError, ValueError) as e:
        raise CloudOperationError(operation, resource, e) from e


class Azure(ICloud):
    subscription_id: str
    crp: ComputeResourceProvider
    nrp: NetworkResourceProvider
    rp: ResourceProvider
    credentials: TokenCredential

    def __init__(self, subscription_id: str, credentials: TokenCredential = None,
                 crp: ComputeResourceProvider = None, nrp: NetworkResourceProvider = None,
                 rp: ResourceProvider = None):
        self.subscription_id = subscription_id
        # browser login stays available for operators without a CLI session
        self.credentials = credentials or DefaultAzureCredential(exclude_interactive_browser_credential=False)
        self.crp = crp or ComputeResourceProvider(subscription_id, self.credentials)
        self.nrp = nrp or NetworkResourceProvider(subscription_id, self.credentials)
        self.rp = rp or ResourceProvider(subscription_id, self.credentials)

    def select_subscription(self, resource_group_name: str):
        with _cloud_operation("Authenticate", "subscription {}".format(self.subscription_id)):
            self.rp.authenticate()
        with _cloud_operation("Get resource group", resource_group_name):
            self.rp.get_resource_group(resource_group_name)

    def get_vm(self, resource_group_name: str, vm_name: str) -> VM:
        try:
            azure_vm: VirtualMachine = self.crp.get_vm(resource_group_name, vm_name)
        except ResourceNotFoundError as e:
            raise SourceVMNotFoundError("VM {} was not found in resource group {}".format(vm_name, resource_group_name)) from e
        except AzureError as e:
            raise CloudOperationError("Get VM", vm_name, e) from e

        azure_os_disk = azure_vm.storage_profile.os_disk
        os_disk = Azure._to_os_disk(azure_os_disk)
        vm = VM(
            id=azure_vm.id,
            name=azure_vm.name,
            resource_group=resource_group_name,
            location=azure_vm.location,
            vm_size=_enum_value(azure_vm.hardware_profile.vm_size),
            os_disk=os_disk,
            os_type=os_disk.os_type,
            zones=list(azure_vm.zones or [])
        )

        # data disks
        for azure_data_disk in azure_vm.storage_profile.data_disks or []:
            vm.data_disks.append(Azure._to_data_disk(azure_data_disk))

        # network interfaces
        for azure_network_interface_reference in azure_vm.network_profile.network_interfaces or []:
            network_interface = self.get_network_interface(azure_network_interface_reference.id)
            network_interface.primary = bool(azure_network_interface_reference.primary)
            vm.network_profile.network_interfaces.append(network_interface)

        return vm

    def stop_vm(self, resource_group_name: str, vm_name: str):
        with _cloud_operation("Stop VM", vm_name):
            self.crp.power_off_vm(resource_group_name, vm_name)

    def delete_vm(self, resource_group_name: str, vm_name: str):
        with _cloud_operation("Delete VM", vm_name):
            self.crp.delete_vm(resource_group_name, vm_name)

    def get_disk(self, resource_group_name: str, disk_name: str) -> Disk:
        with _cloud_operation("Get disk", disk_name):
            azure_disk: AzureDisk = self.crp.get_disk(resource_group_name, disk_name)

        return Disk(
            name=azure_disk.name,
            id=azure_disk.id,
            sku=None if azure_disk.sku is None else _enum_value(azure_disk.sku.name),
            disk_size_gb=azure_disk.disk_size_gb
        )

    def create_snapshot(self, resource_group_name: str, snapshot_name: str, source_disk_id: str,
                        location: str, sku: str = SNAPSHOT_SKU) -> str:
        snapshot = AzureSnapshot(
            location=location,
            creation_data=CreationData(create_option=COPY, source_resource_id=source_disk_id),
            sku=SnapshotSku(name=sku)
        )
        with _cloud_operation("Create snapshot", snapshot_name):
            azure_snapshot = self.crp.put_snapshot(resource_group_name, snapshot_name, snapshot)

        return azure_snapshot.id

    def create_disk_from_snapshot(self, resource_group_name: str, disk_name: str, snapshot_id: str,
                                  location: str, zone: str, sku: str) -> str:
        disk = AzureDisk(
            location=location,
            zones=[str(zone)],
            sku=DiskSku(name=sku),
            creation_data=CreationData(create_option=COPY, source_resource_id=snapshot_id)
        )
        with _cloud_operation("Create disk", disk_name):
            azure_disk = self.crp.put_disk(resource_group_name, disk_name, disk)

        return azure_disk.id

    def delete_snapshot(self, resource_group_name: str, snapshot_name: str):
        with _cloud_operation("Delete snapshot", snapshot_name):
            self.crp.delete_snapshot(resource_group_name, snapshot_name)

    def delete_disk(self, resource_group_name: str, disk_name: str):
        with _cloud_operation("Delete disk", disk_name):
            self.crp.delete_disk(resource_group_name, disk_name)

    def get_network_interface(self, network_interface_id: str) -> NetworkInterface:
        with _cloud_operation("Get network interface", network_interface_id):
            azure_network_interface = self.nrp.get_nic_by_id(network_interface_id)

        network_interface = NetworkInterface(azure_network_interface.id, bool(azure_network_interface.primary))
        for azure_ip_config in azure_network_interface.ip_configurations or []:
            network_interface.ip_configurations.append(NetworkInterfaceIPConfiguration(
                azure_ip_config.name,
                None if azure_ip_config.public_ip_address is None else azure_ip_config.public_ip_address.id
            ))

        return network_interface

    def create_vm(self, resource_group_name: str, vm_config: VMConfig) -> str:
        azure_vm = Azure.to_azure_vm(vm_config)
        with _cloud_operation("Create VM", vm_config.name):
            azure_vm = self.crp.put_vm(resource_group_name, vm_config.name, azure_vm)

        return azure_vm.id

    @classmethod
    def to_azure_vm(cls, vm_config: VMConfig) -> VirtualMachine:
        assert vm_config.os_disk is not None

        azure_vm = VirtualMachine(
            location=vm_config.location,
            zones=[vm_config.zone],
            hardware_profile=HardwareProfile(vm_size=vm_config.vm_size)
        )

        # storage profile
        azure_vm.storage_profile = StorageProfile()
        azure_vm.storage_profile.os_disk = OSDisk(
            name=vm_config.os_disk.name,
            create_option=vm_config.os_disk.create_option,
            os_type=vm_config.os_disk.os_type,
            caching=vm_config.os_disk.caching,
            managed_disk=ManagedDiskParameters(id=vm_config.os_disk.managed_disk_id)
        )
        azure_vm.storage_profile.data_disks = []
        for data_disk in vm_config.data_disks:
            azure_vm.storage_profile.data_disks.append(AzureDataDisk(
                name=data_disk.name,
                lun=data_disk.lun,
                create_option=data_disk.create_option,
                caching=data_disk.caching,
                managed_disk=ManagedDiskParameters(id=data_disk.managed_disk_id)
            ))

        # network profile
        azure_vm.network_profile = AzureNetworkProfile(network_interfaces=[])
        for network_interface in vm_config.network_interfaces:
            azure_vm.network_profile.network_interfaces.append(
                AzureNetworkInterfaceReference(id=network_interface.id, primary=network_interface.primary))

        return azure_vm

    @classmethod
    def _to_os_disk(cls, azure_os_disk: OSDisk) -> OsDisk:
        managed_disk = azure_os_disk.managed_disk
        return OsDisk(
            name=azure_os_disk.name,
            id=None if managed_disk is None else managed_disk.id,
            os_type=_enum_value(azure_os_disk.os_type),
            caching=_enum_value(azure_os_disk.caching),
            disk_size_gb=azure_os_disk.disk_size_gb,
            sku=None if managed_disk is None else _enum_value(managed_disk.storage_account_type)
        )

    @classmethod
    def _to_data_disk(cls, azure_data_disk: AzureDataDisk) -> DataDisk:
        managed_disk = azure_data_disk.managed_disk
        return DataDisk(
            name=azure_data_disk.name,
            id=None if managed_disk is None else managed_disk.id,
            lun=azure_data_disk.lun,
            caching=_enum_value(azure_data_disk.caching),
            disk_size_gb=azure_data_disk.disk_size_gb,
            sku=None if managed_disk is None else _enum_value(managed_disk.storage_account_type)
        )
