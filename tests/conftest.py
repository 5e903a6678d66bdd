"""Shared fixtures: an in-memory cloud and a sample VM to migrate."""

import copy
import logging

import pytest

from zone_migration.cloud.cloud import ICloud
from zone_migration.dm.data_disk import DataDisk
from zone_migration.dm.disk import Disk
from zone_migration.dm.migration_request import MigrationRequest
from zone_migration.dm.network_interface import NetworkInterface
from zone_migration.dm.network_interface_ip_configuration import NetworkInterfaceIPConfiguration
from zone_migration.dm.os_disk import OsDisk
from zone_migration.dm.vm import VM
from zone_migration.exceptions import CloudOperationError, SourceVMNotFoundError

SUBSCRIPTION = "00000000-0000-0000-0000-000000000000"
RESOURCE_GROUP = "rg"
LOCATION = "eastus"


def resource_id(provider: str, kind: str, name: str) -> str:
    return "/subscriptions/{}/resourceGroups/{}/providers/{}/{}/{}".format(
        SUBSCRIPTION, RESOURCE_GROUP, provider, kind, name)


def disk_id(name: str) -> str:
    return resource_id("Microsoft.Compute", "disks", name)


def nic_id(name: str) -> str:
    return resource_id("Microsoft.Network", "networkInterfaces", name)


def make_vm(name="MyVM", data_disks=2, zones=None, public_ip=False, location=LOCATION, os_type="Windows",
            primary="nic-a"):
    vm = VM(
        id=resource_id("Microsoft.Compute", "virtualMachines", name),
        name=name,
        resource_group=RESOURCE_GROUP,
        location=location,
        vm_size="Standard_D4s_v3",
        os_disk=OsDisk("osdisk", disk_id("osdisk"), os_type=os_type, caching="ReadWrite",
                       disk_size_gb=128, sku="Premium_LRS"),
        os_type=os_type,
        zones=list(zones or []),
    )
    caching = ["ReadOnly", "None", "ReadWrite"]
    for lun in range(data_disks):
        vm.data_disks.append(DataDisk("data{}".format(lun), disk_id("data{}".format(lun)), lun,
                                      caching=caching[lun % len(caching)], disk_size_gb=256 + lun,
                                      sku="StandardSSD_LRS"))

    first = NetworkInterface(nic_id("nic-a"), primary=(primary == "nic-a"),
                             ip_configurations=[NetworkInterfaceIPConfiguration("ipconfig1")])
    if public_ip:
        first.ip_configurations[0].public_ip_address_id = resource_id(
            "Microsoft.Network", "publicIPAddresses", "pip-a")
    second = NetworkInterface(nic_id("nic-b"), primary=(primary == "nic-b"),
                              ip_configurations=[NetworkInterfaceIPConfiguration("ipconfig1")])
    vm.network_profile.network_interfaces = [first, second]

    return vm


class FakeCloud(ICloud):
    """In-memory control plane. Failures are injected per (operation, resource name);
    a name of None fails every call of that operation."""

    def __init__(self, vm: VM = None):
        self.vms = {}
        self.disks = {}
        self.snapshots = {}
        self.nics = {}
        self.disk_zones = {}
        self.stopped = set()
        self.created_vms = {}
        self.calls = []
        self.failures = {}
        self.selected = False
        if vm is not None:
            self.add_vm(vm)

    def add_vm(self, vm: VM):
        self.vms[vm.name] = vm
        for disk in vm.get_disks():
            self.disks[disk.name] = Disk(disk.name, disk.id, disk.sku, disk.disk_size_gb)
            self.disk_zones[disk.name] = list(vm.zones)
        for network_interface in vm.network_profile.network_interfaces:
            self.nics[network_interface.id] = network_interface

    def fail(self, operation: str, name: str = None, error: Exception = None):
        self.failures[(operation, name)] = error or CloudOperationError(operation, name or "*", Exception("injected"))

    def calls_to(self, operation: str):
        return [name for op, name in self.calls if op == operation]

    def _call(self, operation: str, name: str):
        self.calls.append((operation, name))
        for key in ((operation, name), (operation, None)):
            if key in self.failures:
                raise self.failures[key]

    def select_subscription(self, resource_group_name):
        self._call("select_subscription", resource_group_name)
        self.selected = True

    def get_vm(self, resource_group_name, vm_name):
        self._call("get_vm", vm_name)
        if vm_name not in self.vms:
            raise SourceVMNotFoundError("VM {} was not found".format(vm_name))
        return copy.deepcopy(self.vms[vm_name])

    def stop_vm(self, resource_group_name, vm_name):
        self._call("stop_vm", vm_name)
        self.stopped.add(vm_name)

    def delete_vm(self, resource_group_name, vm_name):
        self._call("delete_vm", vm_name)
        del self.vms[vm_name]

    def get_disk(self, resource_group_name, disk_name):
        self._call("get_disk", disk_name)
        if disk_name not in self.disks:
            raise CloudOperationError("Get disk", disk_name, Exception("ResourceNotFound"))
        return copy.deepcopy(self.disks[disk_name])

    def create_snapshot(self, resource_group_name, snapshot_name, source_disk_id, location, sku):
        self._call("create_snapshot", snapshot_name)
        if snapshot_name in self.snapshots:
            raise CloudOperationError("Create snapshot", snapshot_name, Exception("Conflict"))
        snapshot_id = resource_id("Microsoft.Compute", "snapshots", snapshot_name)
        self.snapshots[snapshot_name] = {"id": snapshot_id, "source": source_disk_id, "location": location, "sku": sku}
        return snapshot_id

    def create_disk_from_snapshot(self, resource_group_name, disk_name, snapshot_id, location, zone, sku):
        self._call("create_disk_from_snapshot", disk_name)
        if disk_name in self.disks:
            raise CloudOperationError("Create disk", disk_name, Exception("Conflict"))
        source = next(s for s in self.snapshots.values() if s["id"] == snapshot_id)
        original = next(d for d in self.disks.values() if d.id == source["source"])
        self.disks[disk_name] = Disk(disk_name, disk_id(disk_name), sku, original.disk_size_gb)
        self.disk_zones[disk_name] = [zone]
        return self.disks[disk_name].id

    def delete_snapshot(self, resource_group_name, snapshot_name):
        self._call("delete_snapshot", snapshot_name)
        del self.snapshots[snapshot_name]

    def delete_disk(self, resource_group_name, disk_name):
        self._call("delete_disk", disk_name)
        del self.disks[disk_name]

    def get_network_interface(self, network_interface_id):
        name = network_interface_id.split('/')[-1]
        self._call("get_network_interface", name)
        if network_interface_id not in self.nics:
            raise CloudOperationError("Get network interface", network_interface_id, Exception("ResourceNotFound"))
        current = copy.deepcopy(self.nics[network_interface_id])
        # the NIC resource itself does not carry the VM-side primary flag
        current.primary = False
        return current

    def create_vm(self, resource_group_name, vm_config):
        self._call("create_vm", vm_config.name)
        self.created_vms[vm_config.name] = copy.deepcopy(vm_config)
        return resource_id("Microsoft.Compute", "virtualMachines", vm_config.name)


class FakeCloudFactory:
    def __init__(self, cloud: FakeCloud):
        self.cloud = cloud

    def get_cloud(self):
        return self.cloud


@pytest.fixture()
def source_vm():
    return make_vm()


@pytest.fixture()
def fake_cloud(source_vm):
    return FakeCloud(source_vm)


@pytest.fixture()
def request_factory():
    def _make(**kwargs):
        values = {
            "subscription_id": SUBSCRIPTION,
            "resource_group": RESOURCE_GROUP,
            "vm_name": "MyVM",
            "location": LOCATION,
            "zone": "1",
        }
        values.update(kwargs)
        return MigrationRequest(**values)

    return _make


@pytest.fixture(autouse=True)
def reset_zone_migration_logger():
    yield
    logger = logging.getLogger("zone_migration")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
