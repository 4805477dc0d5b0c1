import struct

import pytest

from livoxlidar.definitions import PointDataType
from livoxlidar.packets import (
    CartesianHighPoint,
    CartesianLowPoint,
    CmdPacket,
    EthernetPacket,
    ImuPoint,
    SphericalPoint,
    decode_points,
)


def test_header_sizes_match_packed_layout():
    ethernet = EthernetPacket(
        length=36,
        data_type=PointDataType.CARTESIAN_HIGH,
        data=b"",
    )
    ethernet_raw = ethernet.pack()
    assert len(ethernet_raw) == 36
    assert EthernetPacket.parse(ethernet_raw).data == b""

    cmd = CmdPacket(
        sof=0xAA,
        version=0,
        length=24,
        seq_num=1,
        cmd_id=0,
        cmd_type=0,
        sender_type=0,
        crc16_h=0,
        crc32_d=0,
        data=b"",
    )
    cmd_raw = cmd.pack()
    assert len(cmd_raw) == 24
    assert CmdPacket.parse(cmd_raw).data == b""


def test_decode_cartesian_high():
    payload = struct.pack("<iiiBB", 1000, -2000, 3000, 50, 1) + struct.pack("<iiiBB", -1, 2, -3, 255, 0)
    points = decode_points(PointDataType.CARTESIAN_HIGH, payload, 2)
    assert points == [
        CartesianHighPoint(1000, -2000, 3000, 50, 1),
        CartesianHighPoint(-1, 2, -3, 255, 0),
    ]


def test_decode_cartesian_low():
    payload = struct.pack("<hhhBB", -100, 200, -300, 10, 2)
    assert decode_points(2, payload, 1) == [CartesianLowPoint(-100, 200, -300, 10, 2)]


def test_decode_spherical():
    payload = struct.pack("<IHHBB", 123456, 9000, 1800, 77, 3)
    assert decode_points(PointDataType.SPHERICAL, payload, 1) == [SphericalPoint(123456, 9000, 1800, 77, 3)]


def test_decode_imu():
    payload = struct.pack("<ffffff", 0.5, -0.25, 1.0, 0.0, 0.0, -1.0)
    assert decode_points(PointDataType.IMU, payload, 1) == [ImuPoint(0.5, -0.25, 1.0, 0.0, 0.0, -1.0)]


def test_decode_ignores_extra_payload():
    payload = struct.pack("<hhhBB", 1, 2, 3, 4, 5) * 3
    assert len(decode_points(PointDataType.CARTESIAN_LOW, payload, 2)) == 2


def test_decode_short_payload_raises():
    payload = struct.pack("<hhhBB", 1, 2, 3, 4, 5)
    with pytest.raises(ValueError):
        decode_points(PointDataType.CARTESIAN_LOW, payload, 2)


def test_decode_unknown_type_raises():
    with pytest.raises(ValueError):
        decode_points(0x42, b"\x00" * 64, 1)


def test_ethernet_round_trip():
    payload = struct.pack("<iiiBB", 10, 20, 30, 40, 0)
    packet = EthernetPacket(
        version=0,
        length=EthernetPacket.HEADER_SIZE + len(payload),
        time_interval=500,
        dot_num=1,
        udp_cnt=7,
        frame_cnt=3,
        data_type=PointDataType.CARTESIAN_HIGH,
        time_type=1,
        crc32=0xDEADBEEF,
        timestamp=1_000_000,
        data=payload,
    )
    raw = packet.pack()
    assert len(raw) == packet.length
    assert EthernetPacket.parse(raw) == packet


def test_ethernet_points():
    payload = struct.pack("<IHHBB", 5000, 10, 20, 30, 0) * 2
    packet = EthernetPacket(dot_num=2, data_type=PointDataType.SPHERICAL, data=payload)
    parsed = EthernetPacket.parse(packet.pack())
    assert parsed.points() == [SphericalPoint(5000, 10, 20, 30, 0)] * 2


def test_ethernet_field_offsets():
    packet = EthernetPacket(dot_num=0x0102, data_type=PointDataType.CARTESIAN_LOW)
    raw = packet.pack()
    assert raw[5:7] == (0x0102).to_bytes(2, "little")
    assert raw[10] == PointDataType.CARTESIAN_LOW


def test_ethernet_too_short():
    with pytest.raises(ValueError):
        EthernetPacket.parse(b"\x00" * (EthernetPacket.HEADER_SIZE - 1))


def test_cmd_round_trip():
    packet = CmdPacket(
        sof=0xAA,
        version=0,
        length=CmdPacket.HEADER_SIZE + 3,
        seq_num=12345,
        cmd_id=0x0100,
        cmd_type=1,
        sender_type=1,
        crc16_h=0xBEEF,
        crc32_d=0xCAFEBABE,
        data=b"\x01\x02\x03",
    )
    raw = packet.pack()
    assert len(raw) == packet.length
    assert raw[0] == 0xAA
    assert CmdPacket.parse(raw) == packet


def test_cmd_too_short():
    with pytest.raises(ValueError):
        CmdPacket.parse(b"\xaa\x00")