import json
import struct

import pytest

from livoxlidar.definitions import FuncIOCfg, InstallAttitude, ParamKey
from livoxlidar.state_info import IpCfg, LidarStateInfo
from livoxlidar.state_json import parse_push_message, state_info_to_dict, state_info_to_json


def _payload(*records):
    body = b"".join(struct.pack("<HH", key, len(value)) + value for key, value in records)
    return struct.pack("<HH", len(records), 0) + body


def test_empty_key_set_gives_empty_object():
    assert state_info_to_dict(LidarStateInfo(), set()) == {}
    assert state_info_to_json(LidarStateInfo(), set()) == "{}"


def test_single_key_pretty_layout():
    info = LidarStateInfo(pcl_data_type=1)
    assert state_info_to_json(info, {ParamKey.PCL_DATA_TYPE}) == '{\n    "pcl_data_type": 1\n}'


def test_only_requested_keys_are_written():
    info = LidarStateInfo(pattern_mode=2, dual_emit_en=1, sn="SN-EXAMPLE")
    result = state_info_to_dict(info, {ParamKey.SN, ParamKey.PATTERN_MODE})
    assert result == {"pattern_mode": 2, "sn": "SN-EXAMPLE"}


def test_keys_follow_report_order_not_set_order():
    info = LidarStateInfo()
    keys = [ParamKey.ROI_MODE, ParamKey.SN, ParamKey.PCL_DATA_TYPE, ParamKey.FW_TYPE]
    assert list(state_info_to_dict(info, keys)) == ["pcl_data_type", "sn", "FW_TYPE", "ROI_Mode"]


def test_host_ip_configs_use_shared_layout():
    cfg = IpCfg("192.168.1.50", 56301, 56401)
    info = LidarStateInfo(pointcloud_host_ipcfg=cfg)
    result = state_info_to_dict(info, {ParamKey.LIDAR_POINT_DATA_HOST_IP_CFG})
    assert result == {"ponitcloud_host_ipcfg": {"ip": "192.168.1.50", "dst_port": 56301, "src_port": 56401}}


def test_func_io_cfg_names():
    info = LidarStateInfo(func_io_cfg=FuncIOCfg(8, 10, 12, 11))
    result = state_info_to_dict(info, {ParamKey.FUNC_IO_CFG})
    assert result["func_io_cfg"] == {"IN0": 8, "IN1": 10, "OUT0": 12, "OUT1": 11}


def test_install_attitude_offsets_are_unsigned():
    info = LidarStateInfo(install_attitude=InstallAttitude(1.5, -2.0, 0.25, -1, 20, 0))
    result = state_info_to_dict(info, {ParamKey.INSTALL_ATTITUDE})["install_attitude"]
    assert result["x_mm"] == 4294967295
    assert result["y_mm"] == 20
    assert result["roll_deg"] == 1.5
    assert result["pitch_deg"] == -2.0


def test_status_code_is_hex_most_significant_first():
    code = bytes([0x1A]) + bytes(30) + bytes([0xFF])
    info = LidarStateInfo(status_code=code)
    text = state_info_to_dict(info, {ParamKey.STATUS_CODE})["status_code"]
    parts = text.split(" ")
    assert len(parts) == 32
    assert parts[0] == "ff"
    assert parts[-1] == "1a"
    assert set(parts[1:-1]) == {"0"}


def test_integer_keys_are_accepted():
    info = LidarStateInfo(core_temp=-5)
    assert state_info_to_dict(info, {int(ParamKey.CORE_TEMP)}) == {"core_temp": -5}


def test_json_round_trip_matches_dict():
    info = LidarStateInfo(mac=(1, 2, 3, 4, 5, 6), version_app=(1, 2, 3, 4), hms_code=tuple(range(8)))
    keys = {ParamKey.MAC, ParamKey.VERSION_APP, ParamKey.HMS_CODE}
    assert json.loads(state_info_to_json(info, keys)) == state_info_to_dict(info, keys)


def test_parse_push_message_decodes_payload():
    payload = _payload(
        (ParamKey.PCL_DATA_TYPE, bytes([1])),
        (ParamKey.SN, b"SNEXAMPLE0000001"),
        (ParamKey.LIDAR_IP_CFG, bytes([192, 168, 1, 12, 255, 255, 255, 0, 192, 168, 1, 1])),
    )
    result = json.loads(parse_push_message(payload))
    assert result == {
        "pcl_data_type": 1,
        "lidar_ipcfg": {
            "lidar_ip": "192.168.1.12",
            "lidar_subnet_mask": "255.255.255.0",
            "lidar_gateway": "192.168.1.1",
        },
        "sn": "SNEXAMPLE0000001",
    }


def test_parse_push_message_truncated_raises():
    payload = _payload((ParamKey.SN, b"SNEXAMPLE0000001"))[:-4]
    with pytest.raises(ValueError):
        parse_push_message(payload)