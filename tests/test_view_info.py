import struct

import pytest

from livoxlidar.definitions import DeviceType, LivoxError, ParamKey
from livoxlidar.view_info import (
    MID360_LIDAR_IMU_DATA_PORT,
    MID360_LIDAR_POINT_CLOUD_PORT,
    ViewLidarInfo,
    handle_to_ip,
    ip_to_handle,
    parse_view_lidar_info,
)


def _kv(key, value):
    return struct.pack("<HH", key, len(value)) + value


def _ipcfg(ip, host_port, lidar_port):
    return bytes(ip) + struct.pack("<HH", host_port, lidar_port)


def _response(records, ret_code=0):
    return struct.pack("<BH", ret_code, len(records)) + b"".join(records)


def test_ip_to_handle_keeps_wire_byte_order():
    handle = ip_to_handle("192.168.1.100")
    assert handle.to_bytes(4, "little") == bytes([192, 168, 1, 100])


@pytest.mark.parametrize("ip", ["192.168.1.100", "10.0.0.1", "255.255.255.255", "0.0.0.0"])
def test_handle_ip_round_trip(ip):
    assert handle_to_ip(ip_to_handle(ip)) == ip


def test_handle_to_ip_rejects_out_of_range():
    with pytest.raises(ValueError):
        handle_to_ip(1 << 32)


def test_ip_to_handle_rejects_malformed():
    with pytest.raises(ValueError):
        ip_to_handle("300.1.2.3")


def test_parse_point_and_imu_ports():
    handle = ip_to_handle("192.168.1.12")
    data = _response([
        _kv(ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG, _ipcfg([192, 168, 1, 5], 5001, 6001)),
        _kv(ParamKey.SN, b"TESTSN0000000000"),
        _kv(ParamKey.LIDAR_IMU_HOST_IP_CFG, _ipcfg([192, 168, 1, 5], 5002, 6002)),
    ])
    info = parse_view_lidar_info(handle, DeviceType.HAP, 7000, "192.168.1.5", data)
    assert info == ViewLidarInfo(
        handle=handle,
        dev_type=DeviceType.HAP,
        host_ip="192.168.1.5",
        lidar_cmd_port=7000,
        host_point_port=5001,
        lidar_point_port=6001,
        host_imu_data_port=5002,
        lidar_imu_data_port=6002,
    )
    assert info.lidar_ip == "192.168.1.12"


def test_mid360_lidar_ports_are_fixed():
    data = _response([
        _kv(ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG, _ipcfg([10, 0, 0, 1], 5001, 6001)),
        _kv(ParamKey.LIDAR_IMU_HOST_IP_CFG, _ipcfg([10, 0, 0, 1], 5002, 6002)),
    ])
    info = parse_view_lidar_info(1, DeviceType.MID360, 7000, "10.0.0.1", data)
    assert info.host_point_port == 5001
    assert info.host_imu_data_port == 5002
    assert info.lidar_point_port == MID360_LIDAR_POINT_CLOUD_PORT
    assert info.lidar_imu_data_port == MID360_LIDAR_IMU_DATA_PORT


def test_no_records_leaves_ports_zero():
    info = parse_view_lidar_info(3, DeviceType.HAP, 7000, "10.0.0.1", _response([]))
    assert (info.host_point_port, info.lidar_point_port) == (0, 0)
    assert (info.host_imu_data_port, info.lidar_imu_data_port) == (0, 0)


def test_nonzero_return_code_raises():
    with pytest.raises(LivoxError):
        parse_view_lidar_info(1, DeviceType.HAP, 7000, "10.0.0.1", _response([], ret_code=1))


def test_truncated_response_raises():
    data = _response([_kv(ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG, _ipcfg([10, 0, 0, 1], 5001, 6001))])
    with pytest.raises(ValueError):
        parse_view_lidar_info(1, DeviceType.HAP, 7000, "10.0.0.1", data[:-3])


def test_too_short_header_raises():
    with pytest.raises(ValueError):
        parse_view_lidar_info(1, DeviceType.HAP, 7000, "10.0.0.1", b"\x00")