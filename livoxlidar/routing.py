"""Classification of received datagrams by sender and port, and per-lidar device types."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from livoxlidar.view_info import handle_to_ip


def channel_key(host_ip: str, port: int) -> str:
    """Return the key naming a host socket bound to ``host_ip`` and ``port``."""
    return f"{host_ip}:{port}"


class Route(Enum):
    """Where a received datagram should go."""

    IGNORE = "ignore"
    DATA = "data"
    COMMAND = "command"
    DETECTION = "detection"


@dataclass(frozen=True)
class LidarNetPorts:
    """The ports a configured lidar sends from."""

    cmd_data_port: int = 0
    push_msg_port: int = 0
    point_data_port: int = 0
    imu_data_port: int = 0
    log_data_port: int = 0


@dataclass(frozen=True)
class _LidarEntry:
    dev_type: int
    ports: LidarNetPorts


class LidarRouter:
    """Decides which handler a datagram from a lidar belongs to.

    ``host_ip`` is the host's own address: datagrams it sent itself are ignored.
    ``detection_port`` is the port detection replies come from; ``fault_port``
    is an extra port whose datagrams count as commands for a known lidar.
    """

    def __init__(
        self,
        host_ip: str = "",
        detection_port: Optional[int] = None,
        fault_port: Optional[int] = None,
    ) -> None:
        self.host_ip = host_ip
        self.detection_port = detection_port
        self.fault_port = fault_port
        self._lidars: dict[int, _LidarEntry] = {}
        self._dev_types: dict[int, int] = {}
        self._dev_type_lock = threading.Lock()

    def add_lidar(self, handle: int, dev_type: int, ports: LidarNetPorts) -> None:
        """Register a lidar whose ports are known, replacing any earlier entry."""
        self._lidars[handle] = _LidarEntry(dev_type, ports)

    def route(self, handle: int, port: int) -> Route:
        """Classify a datagram received from ``handle`` on source ``port``."""
        if self.host_ip and handle_to_ip(handle) == self.host_ip:
            return Route.IGNORE

        entry = self._lidars.get(handle)
        if entry is not None:
            ports = entry.ports
            if port in (ports.imu_data_port, ports.point_data_port):
                return Route.DATA
            command_ports = {ports.cmd_data_port, ports.push_msg_port, ports.log_data_port}
            if self.detection_port is not None:
                command_ports.add(self.detection_port)
            if self.fault_port is not None:
                command_ports.add(self.fault_port)
            if port in command_ports:
                return Route.COMMAND
            return Route.IGNORE

        if self.detection_port is not None and port == self.detection_port:
            return Route.DETECTION
        return Route.IGNORE

    def register_device_type(self, handle: int, dev_type: int) -> bool:
        """Record the device type a lidar reported.

        Returns True when the lidar is new, False when it was already known with
        the same type. Raises ValueError if it was known with another type.
        """
        with self._dev_type_lock:
            known = self._dev_types.get(handle)
            if known is None:
                self._dev_types[handle] = dev_type
                return True
            if known != dev_type:
                raise ValueError(
                    f"lidar {handle} reported device type {dev_type}, already known as {known}"
                )
            return False

    def device_type(self, handle: int) -> int:
        """Return the recorded device type of a lidar, or 0 if it is unknown."""
        with self._dev_type_lock:
            return self._dev_types.get(handle, 0)

    def clear(self) -> None:
        """Forget every lidar and device type."""
        self._lidars.clear()
        with self._dev_type_lock:
            self._dev_types.clear()