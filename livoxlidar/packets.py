"""Point records and the point-cloud and command packet layouts."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, NamedTuple, Union

from livoxlidar.definitions import PointDataType


class CartesianHighPoint(NamedTuple):
    """Cartesian point, coordinates in millimetres."""

    x: int
    y: int
    z: int
    reflectivity: int
    tag: int


class CartesianLowPoint(NamedTuple):
    """Cartesian point, coordinates in centimetres."""

    x: int
    y: int
    z: int
    reflectivity: int
    tag: int


class SphericalPoint(NamedTuple):
    depth: int
    theta: int
    phi: int
    reflectivity: int
    tag: int


class ImuPoint(NamedTuple):
    gyro_x: float
    gyro_y: float
    gyro_z: float
    acc_x: float
    acc_y: float
    acc_z: float


Point = Union[CartesianHighPoint, CartesianLowPoint, SphericalPoint, ImuPoint]

_POINT_LAYOUTS = {
    PointDataType.IMU: (struct.Struct("<ffffff"), ImuPoint),
    PointDataType.CARTESIAN_HIGH: (struct.Struct("<iiiBB"), CartesianHighPoint),
    PointDataType.CARTESIAN_LOW: (struct.Struct("<hhhBB"), CartesianLowPoint),
    PointDataType.SPHERICAL: (struct.Struct("<IHHBB"), SphericalPoint),
}


def decode_points(data_type: int, payload: bytes, count: int) -> list[Point]:
    """Decode ``count`` points of the given data type from ``payload``."""
    try:
        layout, point_cls = _POINT_LAYOUTS[PointDataType(data_type)]
    except ValueError:
        raise ValueError(f"unknown point data type: {data_type}") from None
    if count < 0:
        raise ValueError("point count must not be negative")
    needed = layout.size * count
    if len(payload) < needed:
        raise ValueError(f"payload holds {len(payload)} bytes, {needed} needed for {count} points")
    return [point_cls(*values) for values in layout.iter_unpack(bytes(payload[:needed]))]


@dataclass
class EthernetPacket:
    """A point-cloud or IMU data packet as sent by the lidar."""

    version: int = 0
    length: int = 0
    time_interval: int = 0
    dot_num: int = 0
    udp_cnt: int = 0
    frame_cnt: int = 0
    data_type: int = 0
    time_type: int = 0
    rsvd: bytes = bytes(12)
    crc32: int = 0
    timestamp: int = 0
    data: bytes = b""

    HEADER: ClassVar[struct.Struct] = struct.Struct("<BHHHHBBB12sIQ")
    HEADER_SIZE: ClassVar[int] = HEADER.size

    @classmethod
    def parse(cls, data: bytes) -> "EthernetPacket":
        if len(data) < cls.HEADER_SIZE:
            raise ValueError(f"packet needs at least {cls.HEADER_SIZE} bytes, got {len(data)}")
        fields = cls.HEADER.unpack_from(data)
        return cls(*fields, data=bytes(data[cls.HEADER_SIZE:]))

    def pack(self) -> bytes:
        header = self.HEADER.pack(
            self.version,
            self.length,
            self.time_interval,
            self.dot_num,
            self.udp_cnt,
            self.frame_cnt,
            self.data_type,
            self.time_type,
            self.rsvd,
            self.crc32,
            self.timestamp,
        )
        return header + bytes(self.data)

    def points(self) -> list[Point]:
        """Decode the ``dot_num`` points carried by this packet."""
        return decode_points(self.data_type, self.data, self.dot_num)


@dataclass
class CmdPacket:
    """A control-protocol frame exchanged with the lidar."""

    sof: int = 0
    version: int = 0
    length: int = 0
    seq_num: int = 0
    cmd_id: int = 0
    cmd_type: int = 0
    sender_type: int = 0
    rsvd: bytes = bytes(6)
    crc16_h: int = 0
    crc32_d: int = 0
    data: bytes = b""

    HEADER: ClassVar[struct.Struct] = struct.Struct("<BBHIHBB6sHI")
    HEADER_SIZE: ClassVar[int] = HEADER.size

    @classmethod
    def parse(cls, data: bytes) -> "CmdPacket":
        if len(data) < cls.HEADER_SIZE:
            raise ValueError(f"command packet needs at least {cls.HEADER_SIZE} bytes, got {len(data)}")
        fields = cls.HEADER.unpack_from(data)
        return cls(*fields, data=bytes(data[cls.HEADER_SIZE:]))

    def pack(self) -> bytes:
        header = self.HEADER.pack(
            self.sof,
            self.version,
            self.length,
            self.seq_num,
            self.cmd_id,
            self.cmd_type,
            self.sender_type,
            self.rsvd,
            self.crc16_h,
            self.crc32_d,
        )
        return header + bytes(self.data)