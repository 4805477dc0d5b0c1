"""Port discovery for lidars found by broadcast detection, and handle/address conversion."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass

from livoxlidar.definitions import DeviceType, LivoxError, LivoxStatus, ParamKey

MID360_LIDAR_POINT_CLOUD_PORT = 56300
MID360_LIDAR_IMU_DATA_PORT = 56400

# Response header: return code, then the number of key/value records.
_RESPONSE_HEADER = struct.Struct("<BH")
_KV_HEADER = struct.Struct("<HH")
# Inside a host ip config value: four address bytes, then host port and lidar port.
_PORTS = struct.Struct("<HH")
_PORTS_OFFSET = 4


def handle_to_ip(handle: int) -> str:
    """Return the dotted address a device handle stands for.

    A handle holds the address bytes in wire order, read as a little-endian integer.
    """
    if not 0 <= handle <= 0xFFFFFFFF:
        raise ValueError(f"handle out of range: {handle}")
    return str(ipaddress.IPv4Address(handle.to_bytes(4, "little")))


def ip_to_handle(ip: str) -> int:
    """Return the device handle for a dotted IPv4 address (ValueError if malformed)."""
    try:
        packed = ipaddress.IPv4Address(ip).packed
    except ipaddress.AddressValueError as exc:
        raise ValueError(f"invalid IPv4 address: {ip!r}") from exc
    return int.from_bytes(packed, "little")


@dataclass
class ViewLidarInfo:
    """Where a detected lidar sends its data and where the host listens for it."""

    handle: int
    dev_type: int
    host_ip: str
    lidar_cmd_port: int = 0
    host_point_port: int = 0
    lidar_point_port: int = 0
    host_imu_data_port: int = 0
    lidar_imu_data_port: int = 0

    @property
    def lidar_ip(self) -> str:
        return handle_to_ip(self.handle)


def parse_view_lidar_info(handle: int, dev_type: int, cmd_port: int, host_ip: str, data: bytes) -> ViewLidarInfo:
    """Build the port layout of a lidar from its internal-info query response.

    ``data`` is the whole response: return code, record count and key/value records.
    Raises LivoxError if the lidar returned a non-zero code, ValueError if the
    response is truncated.
    """
    data = bytes(data)
    if len(data) < _RESPONSE_HEADER.size:
        raise ValueError(f"response needs at least {_RESPONSE_HEADER.size} bytes, got {len(data)}")
    ret_code, param_num = _RESPONSE_HEADER.unpack_from(data)
    if ret_code != 0:
        raise LivoxError(LivoxStatus.FAILURE, f"internal info query returned code {ret_code}")

    info = ViewLidarInfo(handle=handle, dev_type=dev_type, host_ip=host_ip, lidar_cmd_port=cmd_port)
    offset = _RESPONSE_HEADER.size
    for _ in range(param_num):
        if offset + _KV_HEADER.size > len(data):
            raise ValueError(f"response truncated at offset {offset}")
        key, length = _KV_HEADER.unpack_from(data, offset)
        value = data[offset + _KV_HEADER.size:offset + _KV_HEADER.size + length]
        if len(value) < length:
            raise ValueError(f"value of key 0x{key:04X} runs past the end of the response")
        if key in (ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG, ParamKey.LIDAR_IMU_HOST_IP_CFG):
            if len(value) < _PORTS_OFFSET + _PORTS.size:
                raise ValueError(f"host ip config of key 0x{key:04X} is too short")
            host_port, lidar_port = _PORTS.unpack_from(value, _PORTS_OFFSET)
            if key == ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG:
                info.host_point_port, info.lidar_point_port = host_port, lidar_port
            else:
                info.host_imu_data_port, info.lidar_imu_data_port = host_port, lidar_port
        offset += _KV_HEADER.size + length

    if dev_type == DeviceType.MID360:
        info.lidar_point_port = MID360_LIDAR_POINT_CLOUD_PORT
        info.lidar_imu_data_port = MID360_LIDAR_IMU_DATA_PORT
    return info