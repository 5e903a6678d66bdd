SNAPSHOT_SUFFIX = "-snapshot"
ZONED_DISK_INFIX = "_z_"


def get_snapshot_name(disk_name: str) -> str:
    return "{}{}".format(disk_name, SNAPSHOT_SUFFIX)


def get_zoned_disk_name(disk_name: str, zone: str) -> str:
    return "{}{}{}".format(disk_name, ZONED_DISK_INFIX, zone)
