"""Decoding of the key/value state report a lidar pushes or returns on query."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Callable

from livoxlidar.definitions import FovCfg, FuncIOCfg, InstallAttitude, ParamKey

_COUNT = struct.Struct("<H")
_KV_HEADER = struct.Struct("<HH")
# A key/value record is at least its two 16-bit header fields plus one value byte.
_KV_MIN_SIZE = _KV_HEADER.size + 1
# The key count is followed by two reserved bytes.
_PAYLOAD_HEADER_SIZE = 4
_PORTS = struct.Struct("<HH")


@dataclass
class IpCfg:
    """An address and the pair of ports used for one traffic class."""

    ip_addr: str = ""
    dst_port: int = 0
    src_port: int = 0


@dataclass
class LidarIpCfg:
    """The lidar's own address, subnet mask and gateway."""

    ip_addr: str = ""
    net_mask: str = ""
    gw_addr: str = ""


@dataclass
class LidarStateInfo:
    """Every parameter a lidar can report; fields not reported keep their defaults."""

    pcl_data_type: int = 0
    pattern_mode: int = 0
    dual_emit_en: int = 0
    point_send_en: int = 0
    lidar_ipcfg: LidarIpCfg = field(default_factory=LidarIpCfg)
    host_state_info: IpCfg = field(default_factory=IpCfg)
    pointcloud_host_ipcfg: IpCfg = field(default_factory=IpCfg)
    imu_host_ipcfg: IpCfg = field(default_factory=IpCfg)
    ctl_host_ipcfg: IpCfg = field(default_factory=IpCfg)
    log_host_ipcfg: IpCfg = field(default_factory=IpCfg)

    vehicle_speed: int = 0
    environment_temp: int = 0
    install_attitude: InstallAttitude = field(default_factory=InstallAttitude)
    blind_spot_set: int = 0
    frame_rate: int = 0
    fov_cfg0: FovCfg = field(default_factory=FovCfg)
    fov_cfg1: FovCfg = field(default_factory=FovCfg)
    fov_cfg_en: int = 0
    detect_mode: int = 0
    func_io_cfg: FuncIOCfg = field(default_factory=FuncIOCfg)
    work_tgt_mode: int = 0
    glass_heat: int = 0
    imu_data_en: int = 0
    fusa_en: int = 0

    sn: str = ""
    product_info: str = ""
    version_app: tuple[int, ...] = (0, 0, 0, 0)
    version_loader: tuple[int, ...] = (0, 0, 0, 0)
    version_hardware: tuple[int, ...] = (0, 0, 0, 0)
    mac: tuple[int, ...] = (0, 0, 0, 0, 0, 0)
    cur_work_state: int = 0
    core_temp: int = 0
    powerup_cnt: int = 0
    local_time_now: int = 0
    last_sync_time: int = 0
    time_offset: int = 0
    time_sync_type: int = 0
    status_code: bytes = bytes(32)
    lidar_diag_status: int = 0
    lidar_flash_status: int = 0
    fw_type: int = 0
    hms_code: tuple[int, ...] = (0,) * 8
    roi_mode: int = 0


def _fit(value: bytes, size: int) -> bytes:
    """Copy ``value`` into a zeroed field of ``size`` bytes, dropping any excess."""
    return value[:size].ljust(size, b"\0")


def _scalar(fmt: str) -> Callable[[bytes], int]:
    layout = struct.Struct("<" + fmt)
    return lambda value: layout.unpack(_fit(value, layout.size))[0]


def _array(fmt: str, count: int) -> Callable[[bytes], tuple[int, ...]]:
    layout = struct.Struct(f"<{count}{fmt}")
    return lambda value: layout.unpack(_fit(value, layout.size))


def _text(size: int) -> Callable[[bytes], str]:
    return lambda value: _fit(value, size).split(b"\0", 1)[0].decode("latin-1")


def _raw(size: int) -> Callable[[bytes], bytes]:
    return lambda value: _fit(value, size)


def _record(cls) -> Callable[[bytes], object]:
    return lambda value: cls.unpack(_fit(value, cls.STRUCT.size))


def _dotted(value: bytes) -> str:
    return ".".join(str(octet) for octet in value[:4])


def _need(value: bytes, size: int, what: str) -> None:
    if len(value) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(value)}")


def _ip_cfg(value: bytes) -> IpCfg:
    _need(value, 4 + _PORTS.size, "host ip config")
    dst_port, src_port = _PORTS.unpack_from(value, 4)
    return IpCfg(_dotted(value), dst_port, src_port)


def _lidar_ip_cfg(value: bytes) -> LidarIpCfg:
    _need(value, 12, "lidar ip config")
    return LidarIpCfg(_dotted(value[0:4]), _dotted(value[4:8]), _dotted(value[8:12]))


_DECODERS: dict[ParamKey, tuple[str, Callable[[bytes], object]]] = {
    ParamKey.PCL_DATA_TYPE: ("pcl_data_type", _scalar("B")),
    ParamKey.PATTERN_MODE: ("pattern_mode", _scalar("B")),
    ParamKey.DUAL_EMIT_EN: ("dual_emit_en", _scalar("B")),
    ParamKey.POINT_SEND_EN: ("point_send_en", _scalar("B")),
    ParamKey.LIDAR_IP_CFG: ("lidar_ipcfg", _lidar_ip_cfg),
    ParamKey.STATE_INFO_HOST_IP_CFG: ("host_state_info", _ip_cfg),
    ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG: ("pointcloud_host_ipcfg", _ip_cfg),
    ParamKey.LIDAR_IMU_HOST_IP_CFG: ("imu_host_ipcfg", _ip_cfg),
    ParamKey.CTL_HOST_IP_CFG: ("ctl_host_ipcfg", _ip_cfg),
    ParamKey.LOG_HOST_IP_CFG: ("log_host_ipcfg", _ip_cfg),
    ParamKey.VEHICLE_SPEED: ("vehicle_speed", _scalar("i")),
    ParamKey.ENVIRONMENT_TEMP: ("environment_temp", _scalar("i")),
    ParamKey.INSTALL_ATTITUDE: ("install_attitude", _record(InstallAttitude)),
    ParamKey.BLIND_SPOT_SET: ("blind_spot_set", _scalar("I")),
    ParamKey.FRAME_RATE: ("frame_rate", _scalar("B")),
    ParamKey.FOV_CFG0: ("fov_cfg0", _record(FovCfg)),
    ParamKey.FOV_CFG1: ("fov_cfg1", _record(FovCfg)),
    ParamKey.FOV_CFG_EN: ("fov_cfg_en", _scalar("B")),
    ParamKey.DETECT_MODE: ("detect_mode", _scalar("B")),
    ParamKey.FUNC_IO_CFG: ("func_io_cfg", _record(FuncIOCfg)),
    ParamKey.WORK_MODE: ("work_tgt_mode", _scalar("B")),
    ParamKey.GLASS_HEAT: ("glass_heat", _scalar("B")),
    ParamKey.IMU_DATA_EN: ("imu_data_en", _scalar("B")),
    ParamKey.FUSA_EN: ("fusa_en", _scalar("B")),
    ParamKey.SN: ("sn", _text(16)),
    ParamKey.PRODUCT_INFO: ("product_info", _text(64)),
    ParamKey.VERSION_APP: ("version_app", _array("B", 4)),
    ParamKey.VERSION_LOADER: ("version_loader", _array("B", 4)),
    ParamKey.VERSION_HARDWARE: ("version_hardware", _array("B", 4)),
    ParamKey.MAC: ("mac", _array("B", 6)),
    ParamKey.CUR_WORK_STATE: ("cur_work_state", _scalar("B")),
    ParamKey.CORE_TEMP: ("core_temp", _scalar("i")),
    ParamKey.POWER_UP_CNT: ("powerup_cnt", _scalar("I")),
    ParamKey.LOCAL_TIME_NOW: ("local_time_now", _scalar("Q")),
    ParamKey.LAST_SYNC_TIME: ("last_sync_time", _scalar("Q")),
    ParamKey.TIME_OFFSET: ("time_offset", _scalar("q")),
    ParamKey.TIME_SYNC_TYPE: ("time_sync_type", _scalar("B")),
    ParamKey.STATUS_CODE: ("status_code", _raw(32)),
    ParamKey.LIDAR_DIAG_STATUS: ("lidar_diag_status", _scalar("H")),
    ParamKey.LIDAR_FLASH_STATUS: ("lidar_flash_status", _scalar("B")),
    ParamKey.FW_TYPE: ("fw_type", _scalar("B")),
    ParamKey.HMS_CODE: ("hms_code", _array("I", 8)),
    ParamKey.ROI_MODE: ("roi_mode", _scalar("B")),
}


def parse_state_info(data: bytes) -> tuple[LidarStateInfo, set[ParamKey]]:
    """Decode a state payload.

    Returns the decoded state together with the set of keys the payload carried.
    Keys the decoder does not know are skipped. Raises ValueError if the payload
    is truncated.
    """
    data = bytes(data)
    if len(data) < _COUNT.size:
        raise ValueError(f"state payload needs at least {_COUNT.size} bytes, got {len(data)}")
    (key_num,) = _COUNT.unpack_from(data)

    info = LidarStateInfo()
    keys: set[ParamKey] = set()
    offset = _PAYLOAD_HEADER_SIZE
    for _ in range(key_num):
        if offset + _KV_MIN_SIZE > len(data):
            raise ValueError(f"state payload truncated at offset {offset}")
        key, length = _KV_HEADER.unpack_from(data, offset)
        offset += _KV_HEADER.size
        value = data[offset:offset + length]
        if len(value) < length:
            raise ValueError(f"value of key 0x{key:04X} runs past the end of the payload")
        entry = _DECODERS.get(key)
        if entry is not None:
            name, decode = entry
            setattr(info, name, decode(value))
            keys.add(ParamKey(key))
        offset += length
    return info, keys