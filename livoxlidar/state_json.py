"""Rendering of a decoded lidar state report as an ordered mapping or JSON text."""

from __future__ import annotations

import json
from collections.abc import Collection
from typing import Any

from livoxlidar.definitions import ParamKey
from livoxlidar.state_info import IpCfg, LidarStateInfo, parse_state_info

_UINT32_MASK = 0xFFFFFFFF


def _host_cfg(cfg: IpCfg) -> dict[str, Any]:
    return {"ip": cfg.ip_addr, "dst_port": cfg.dst_port, "src_port": cfg.src_port}


def _fov(cfg) -> dict[str, int]:
    return {
        "yaw_start": cfg.yaw_start,
        "yaw_stop": cfg.yaw_stop,
        "pitch_start": cfg.pitch_start,
        "pitch_stop": cfg.pitch_stop,
    }


def _status_code_text(status_code: bytes) -> str:
    # Bytes are written most significant first, each in unpadded hex.
    return " ".join(format(octet, "x") for octet in reversed(status_code[:32].ljust(32, b"\0")))


def _entries(info: LidarStateInfo):
    """Yield (key, json name, value factory) in the order the report is written."""
    attitude = info.install_attitude
    io_cfg = info.func_io_cfg
    yield ParamKey.PCL_DATA_TYPE, "pcl_data_type", lambda: info.pcl_data_type
    yield ParamKey.PATTERN_MODE, "pattern_mode", lambda: info.pattern_mode
    yield ParamKey.DUAL_EMIT_EN, "dual_emit_en", lambda: info.dual_emit_en
    yield ParamKey.POINT_SEND_EN, "point_send_en", lambda: info.point_send_en
    yield ParamKey.LIDAR_IP_CFG, "lidar_ipcfg", lambda: {
        "lidar_ip": info.lidar_ipcfg.ip_addr,
        "lidar_subnet_mask": info.lidar_ipcfg.net_mask,
        "lidar_gateway": info.lidar_ipcfg.gw_addr,
    }
    yield ParamKey.STATE_INFO_HOST_IP_CFG, "state_info_host_ipcfg", lambda: _host_cfg(info.host_state_info)
    yield ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG, "ponitcloud_host_ipcfg", lambda: _host_cfg(
        info.pointcloud_host_ipcfg
    )
    yield ParamKey.LIDAR_IMU_HOST_IP_CFG, "imu_host_ipcfg", lambda: _host_cfg(info.imu_host_ipcfg)
    yield ParamKey.CTL_HOST_IP_CFG, "ctl_host_ipcfg", lambda: _host_cfg(info.ctl_host_ipcfg)
    yield ParamKey.LOG_HOST_IP_CFG, "log_host_ipcfg", lambda: _host_cfg(info.log_host_ipcfg)
    yield ParamKey.VEHICLE_SPEED, "vehicle_speed", lambda: info.vehicle_speed
    yield ParamKey.ENVIRONMENT_TEMP, "environment_temp", lambda: info.environment_temp
    yield ParamKey.INSTALL_ATTITUDE, "install_attitude", lambda: {
        "roll_deg": float(attitude.roll_deg),
        "pitch_deg": float(attitude.pitch_deg),
        "yaw_deg": float(attitude.yaw_deg),
        # Offsets are reported as unsigned 32-bit values.
        "x_mm": attitude.x & _UINT32_MASK,
        "y_mm": attitude.y & _UINT32_MASK,
        "z_mm": attitude.z & _UINT32_MASK,
    }
    yield ParamKey.BLIND_SPOT_SET, "blind_spot_set", lambda: info.blind_spot_set
    yield ParamKey.FRAME_RATE, "frame_rate", lambda: info.frame_rate
    yield ParamKey.FOV_CFG0, "fov_cfg0", lambda: _fov(info.fov_cfg0)
    yield ParamKey.FOV_CFG1, "fov_cfg1", lambda: _fov(info.fov_cfg1)
    yield ParamKey.FOV_CFG_EN, "fov_cfg_en", lambda: info.fov_cfg_en
    yield ParamKey.DETECT_MODE, "detect_mode", lambda: info.detect_mode
    yield ParamKey.FUNC_IO_CFG, "func_io_cfg", lambda: {
        "IN0": io_cfg.in0,
        "IN1": io_cfg.in1,
        "OUT0": io_cfg.out0,
        "OUT1": io_cfg.out1,
    }
    yield ParamKey.WORK_MODE, "work_tgt_mode", lambda: info.work_tgt_mode
    yield ParamKey.GLASS_HEAT, "glass_heat", lambda: info.glass_heat
    yield ParamKey.IMU_DATA_EN, "imu_data_en", lambda: info.imu_data_en
    yield ParamKey.FUSA_EN, "fusa_en", lambda: info.fusa_en
    yield ParamKey.SN, "sn", lambda: info.sn
    yield ParamKey.PRODUCT_INFO, "product_info", lambda: info.product_info
    yield ParamKey.VERSION_APP, "version_app", lambda: list(info.version_app[:4])
    yield ParamKey.VERSION_LOADER, "version_loader", lambda: list(info.version_loader[:4])
    yield ParamKey.VERSION_HARDWARE, "version_hardware", lambda: list(info.version_hardware[:4])
    yield ParamKey.MAC, "mac", lambda: list(info.mac[:6])
    yield ParamKey.CUR_WORK_STATE, "cur_work_state", lambda: info.cur_work_state
    yield ParamKey.CORE_TEMP, "core_temp", lambda: info.core_temp
    yield ParamKey.POWER_UP_CNT, "powerup_cnt", lambda: info.powerup_cnt
    yield ParamKey.LOCAL_TIME_NOW, "local_time_now", lambda: info.local_time_now
    yield ParamKey.LAST_SYNC_TIME, "last_sync_time", lambda: info.last_sync_time
    yield ParamKey.TIME_OFFSET, "time_offset", lambda: info.time_offset
    yield ParamKey.TIME_SYNC_TYPE, "time_sync_type", lambda: info.time_sync_type
    yield ParamKey.STATUS_CODE, "status_code", lambda: _status_code_text(info.status_code)
    yield ParamKey.LIDAR_DIAG_STATUS, "lidar_diag_status", lambda: info.lidar_diag_status
    yield ParamKey.LIDAR_FLASH_STATUS, "lidar_flash_status", lambda: info.lidar_flash_status
    yield ParamKey.FW_TYPE, "FW_TYPE", lambda: info.fw_type
    yield ParamKey.HMS_CODE, "hms_code", lambda: list(info.hms_code[:8])
    yield ParamKey.ROI_MODE, "ROI_Mode", lambda: info.roi_mode


def state_info_to_dict(info: LidarStateInfo, keys: Collection[int]) -> dict[str, Any]:
    """Return the reported fields of ``info`` named by ``keys``, in report order."""
    return {name: value() for key, name, value in _entries(info) if key in keys}


def state_info_to_json(info: LidarStateInfo, keys: Collection[int]) -> str:
    """Return the reported fields of ``info`` named by ``keys`` as indented JSON."""
    return json.dumps(state_info_to_dict(info, keys), indent=4)


def parse_push_message(data: bytes) -> str:
    """Decode a pushed state payload and render it as JSON text.

    Raises ValueError if the payload is truncated.
    """
    info, keys = parse_state_info(data)
    return state_info_to_json(info, keys)