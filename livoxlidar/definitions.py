"""Protocol constants, status codes and small fixed-layout configuration records."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

MAX_LIDAR_COUNT = 32
BROADCAST_CODE_SIZE = 16

SDK_MAJOR_VERSION = 1
SDK_MINOR_VERSION = 2
SDK_PATCH_VERSION = 5


class DeviceType(IntEnum):
    HUB = 0
    MID40 = 1
    TELE = 2
    HORIZON = 3
    MID70 = 6
    AVIA = 7
    MID360 = 9
    INDUSTRIAL_HAP = 10
    HAP = 15
    PA = 16


class ParamKey(IntEnum):
    PCL_DATA_TYPE = 0x0000
    PATTERN_MODE = 0x0001
    DUAL_EMIT_EN = 0x0002
    POINT_SEND_EN = 0x0003
    LIDAR_IP_CFG = 0x0004
    STATE_INFO_HOST_IP_CFG = 0x0005
    LIDAR_POINT_DATA_HOST_IP_CFG = 0x0006
    LIDAR_IMU_HOST_IP_CFG = 0x0007
    CTL_HOST_IP_CFG = 0x0008
    LOG_HOST_IP_CFG = 0x0009

    VEHICLE_SPEED = 0x0010
    ENVIRONMENT_TEMP = 0x0011
    INSTALL_ATTITUDE = 0x0012
    BLIND_SPOT_SET = 0x0013
    FRAME_RATE = 0x0014
    FOV_CFG0 = 0x0015
    FOV_CFG1 = 0x0016
    FOV_CFG_EN = 0x0017
    DETECT_MODE = 0x0018
    FUNC_IO_CFG = 0x0019
    WORK_MODE_AFTER_BOOT = 0x0020
    WORK_MODE = 0x001A
    GLASS_HEAT = 0x001B
    IMU_DATA_EN = 0x001C
    FUSA_EN = 0x001D
    FORCE_HEAT_EN = 0x001E

    LOG_PARAM_SET = 0x7FFF

    SN = 0x8000
    PRODUCT_INFO = 0x8001
    VERSION_APP = 0x8002
    VERSION_LOADER = 0x8003
    VERSION_HARDWARE = 0x8004
    MAC = 0x8005
    CUR_WORK_STATE = 0x8006
    CORE_TEMP = 0x8007
    POWER_UP_CNT = 0x8008
    LOCAL_TIME_NOW = 0x8009
    LAST_SYNC_TIME = 0x800A
    TIME_OFFSET = 0x800B
    TIME_SYNC_TYPE = 0x800C
    STATUS_CODE = 0x800D
    LIDAR_DIAG_STATUS = 0x800E
    LIDAR_FLASH_STATUS = 0x800F
    FW_TYPE = 0x8010
    HMS_CODE = 0x8011
    CUR_GLASS_HEAT_STATE = 0x8012

    ROI_MODE = 0xFFFE
    LIDAR_DIAG_INFO_QUERY = 0xFFFF


class PointDataType(IntEnum):
    IMU = 0x00
    CARTESIAN_HIGH = 0x01
    CARTESIAN_LOW = 0x02
    SPHERICAL = 0x03


class LogType(IntEnum):
    REAL_TIME = 0x00
    EXCEPTION = 0x01


class LivoxStatus(IntEnum):
    SEND_FAILED = -9
    HANDLER_IMPL_NOT_EXIST = -8
    INVALID_HANDLE = -7
    CHANNEL_NOT_EXIST = -6
    NOT_ENOUGH_MEMORY = -5
    TIMEOUT = -4
    NOT_SUPPORTED = -3
    NOT_CONNECTED = -2
    FAILURE = -1
    SUCCESS = 0


class ScanPattern(IntEnum):
    NON_REPETITIVE = 0x00
    REPETITIVE = 0x01
    REPETITIVE_LOW_FRAME_RATE = 0x02


class FrameRate(IntEnum):
    HZ_10 = 0x00
    HZ_15 = 0x01
    HZ_20 = 0x02
    HZ_25 = 0x03


class WorkMode(IntEnum):
    NORMAL = 0x01
    WAKE_UP = 0x02
    SLEEP = 0x03
    ERROR = 0x04
    POWER_ON_SELF_TEST = 0x05
    MOTOR_STARTING = 0x06
    MOTOR_STOPPING = 0x07
    UPGRADE = 0x08


class WorkModeAfterBoot(IntEnum):
    DEFAULT = 0x00
    NORMAL = 0x01
    WAKE_UP = 0x02


class DetectMode(IntEnum):
    NORMAL = 0x00
    SENSITIVE = 0x01


class GlassHeat(IntEnum):
    STOP_POWER_ON_OR_DIAGNOSTIC_HEATING = 0x00
    TURN_ON_HEATING = 0x01
    DIAGNOSTIC_HEATING = 0x02
    STOP_SELF_HEATING = 0x03


class UpgradeFsmState(IntEnum):
    IDLE = 0
    REQUEST = 1
    XFER_FIRMWARE = 2
    COMPLETE_XFER_FIRMWARE = 3
    GET_UPGRADE_PROGRESS = 4
    COMPLETE = 5
    TIMEOUT = 6
    ERR = 7
    UNDEF = 8


class UpgradeFsmEvent(IntEnum):
    REQUEST_UPGRADE = 0
    XFER_FIRMWARE = 1
    COMPLETE_XFER_FIRMWARE = 2
    GET_UPGRADE_PROGRESS = 3
    COMPLETE = 4
    REINIT = 5
    TIMEOUT = 6
    ERR = 7
    UNDEF = 8


class LivoxError(Exception):
    """Raised when an operation reports a status other than success."""

    def __init__(self, status: int, message: str | None = None) -> None:
        try:
            status = LivoxStatus(status)
        except ValueError:
            pass
        self.status = status
        name = status.name if isinstance(status, LivoxStatus) else str(status)
        super().__init__(message or f"livox operation failed: {name}")


@dataclass(frozen=True)
class SdkVersion:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def get_sdk_version() -> SdkVersion:
    """Return the protocol library version."""
    return SdkVersion(SDK_MAJOR_VERSION, SDK_MINOR_VERSION, SDK_PATCH_VERSION)


def check_status(status: int) -> LivoxStatus:
    """Return SUCCESS for a success status, raise LivoxError for any other."""
    if status == LivoxStatus.SUCCESS:
        return LivoxStatus.SUCCESS
    raise LivoxError(status)


def _require(data: bytes, size: int, name: str) -> None:
    if len(data) < size:
        raise ValueError(f"{name} needs {size} bytes, got {len(data)}")


@dataclass
class InstallAttitude:
    """Extrinsic parameters: angles in degrees, offsets in millimetres."""

    roll_deg: float = 0.0
    pitch_deg: float = 0.0
    yaw_deg: float = 0.0
    x: int = 0
    y: int = 0
    z: int = 0

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<fffiii")

    def pack(self) -> bytes:
        return self.STRUCT.pack(self.roll_deg, self.pitch_deg, self.yaw_deg, self.x, self.y, self.z)

    @classmethod
    def unpack(cls, data: bytes) -> "InstallAttitude":
        _require(data, cls.STRUCT.size, cls.__name__)
        return cls(*cls.STRUCT.unpack_from(data))


@dataclass
class FovCfg:
    yaw_start: int = 0
    yaw_stop: int = 0
    pitch_start: int = 0
    pitch_stop: int = 0
    rsvd: int = 0

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<iiiiI")

    def pack(self) -> bytes:
        return self.STRUCT.pack(self.yaw_start, self.yaw_stop, self.pitch_start, self.pitch_stop, self.rsvd)

    @classmethod
    def unpack(cls, data: bytes) -> "FovCfg":
        _require(data, cls.STRUCT.size, cls.__name__)
        return cls(*cls.STRUCT.unpack_from(data))


@dataclass
class FuncIOCfg:
    """Function of each IO line: IN0, IN1, OUT0, OUT1."""

    in0: int = 0
    in1: int = 0
    out0: int = 0
    out1: int = 0

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<BBBB")

    def pack(self) -> bytes:
        return self.STRUCT.pack(self.in0, self.in1, self.out0, self.out1)

    @classmethod
    def unpack(cls, data: bytes) -> "FuncIOCfg":
        _require(data, cls.STRUCT.size, cls.__name__)
        return cls(*cls.STRUCT.unpack_from(data))