import pytest

from proxmoxve.vm_general import PropertyError, QueryValues
from proxmoxve.vm_storage import StorageDevice, encode_storage_devices


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (
            "local-lvm:vm-2041-disk-0,discard=on,ssd=1,iothread=1,size=8G",
            StorageDevice(
                discard="on",
                enabled=True,
                file_volume="local-lvm:vm-2041-disk-0",
                iothread=True,
                size="8G",
                ssd=True,
            ),
        ),
        (
            "nfs:2041/vm-2041-disk-0.raw,discard=ignore,ssd=1,iothread=1,size=8G",
            StorageDevice(
                discard="ignore",
                enabled=True,
                file_volume="nfs:2041/vm-2041-disk-0.raw",
                format="raw",
                iothread=True,
                size="8G",
                ssd=True,
            ),
        ),
    ],
    ids=["simple volume", "raw volume type"],
)
def test_parse_source_cases(line, expected):
    assert StorageDevice.parse(line) == expected


def test_parse_all_fields():
    device = StorageDevice.parse(
        "file=local:100/disk.qcow2,aio=native,backup=0,mbps_rd=10,mbps_rd_max=20,"
        "mbps_wr=30,mbps_wr_max=40,media=cdrom,format=qcow2"
    )
    assert device.file_volume == "local:100/disk.qcow2"
    assert device.aio == "native"
    assert device.backup_enabled is False
    assert device.max_read_speed_mbps == 10
    assert device.burstable_read_speed_mbps == 20
    assert device.max_write_speed_mbps == 30
    assert device.burstable_write_speed_mbps == 40
    assert device.media == "cdrom"
    assert device.format == "qcow2"
    assert device.enabled is True


def test_parse_extension_only_after_last_slash():
    device = StorageDevice.parse("nfs.share:dir/vm-disk")
    assert device.format is None
    assert device.file_volume == "nfs.share:dir/vm-disk"


def test_parse_bad_integer_raises():
    with pytest.raises(PropertyError):
        StorageDevice.parse("local:disk,mbps_rd=fast")


def test_encode_order_and_flags():
    values = QueryValues()
    StorageDevice(
        file_volume="local-lvm:vm-1-disk-0",
        aio="io_uring",
        backup_enabled=True,
        burstable_read_speed_mbps=5,
        max_write_speed_mbps=7,
        media="disk",
        size="8G",
        iothread=False,
        ssd=True,
        discard="on",
    ).encode_values("scsi0", values)
    assert values.get("scsi0") == (
        "file=local-lvm:vm-1-disk-0,aio=io_uring,backup=1,mbps_rd_max=5,"
        "mbps_wr=7,media=disk,size=8G,iothread=0,ssd=1,discard=on"
    )


def test_encode_skips_empty_discard():
    values = QueryValues()
    StorageDevice(file_volume="local:disk", discard="").encode_values("sata0", values)
    assert values.get("sata0") == "file=local:disk"


def test_parse_encode_round_trip():
    line = "file=local-lvm:vm-2041-disk-0,size=8G,iothread=1,ssd=1,discard=on"
    values = QueryValues()
    StorageDevice.parse(line).encode_values("virtio0", values)
    assert StorageDevice.parse(values.get("virtio0")) == StorageDevice.parse(line)


def test_encode_storage_devices_only_enabled():
    values = QueryValues()
    encode_storage_devices(
        {
            "scsi0": StorageDevice(file_volume="a", enabled=True),
            "scsi1": StorageDevice(file_volume="b", enabled=False),
            "scsi2": StorageDevice(file_volume="c", enabled=True),
        },
        values,
    )
    assert values.get_all("scsi0") == ["file=a"]
    assert "scsi1" not in values
    assert values.get_all("scsi2") == ["file=c"]
    assert len(values) == 2