"""Dispatch of received point-cloud and IMU packets to registered callbacks."""

from __future__ import annotations

import threading
from typing import Callable, Optional, Union

from livoxlidar.definitions import PointDataType
from livoxlidar.packets import EthernetPacket

DataCallback = Callable[[int, int, EthernetPacket], None]

_MAX_OBSERVER_ID = 0xFFFF


class DataHandler:
    """Routes each data packet to the point or IMU callback and to every observer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._point_callback: Optional[DataCallback] = None
        self._imu_callback: Optional[DataCallback] = None
        self._observers: dict[int, DataCallback] = {}
        self._last_observer_id = 1

    def handle(self, dev_type: int, handle: int, data: Union[bytes, EthernetPacket, None]) -> None:
        """Deliver one packet; raw bytes are parsed first (ValueError if too short)."""
        if data is None:
            return
        packet = data if isinstance(data, EthernetPacket) else EthernetPacket.parse(data)

        if packet.data_type == PointDataType.IMU:
            callback = self._imu_callback
        else:
            callback = self._point_callback
        if callback is not None:
            callback(handle, dev_type, packet)

        with self._lock:
            observers = list(self._observers.values())
        for observer in observers:
            observer(handle, dev_type, packet)

    def add_point_cloud_observer(self, callback: DataCallback) -> int:
        """Register an observer of every packet and return its id."""
        with self._lock:
            observer_id = self._next_observer_id()
            self._observers[observer_id] = callback
        return observer_id

    def remove_point_cloud_observer(self, observer_id: int) -> None:
        with self._lock:
            self._observers.pop(observer_id, None)

    def set_point_data_callback(self, callback: Optional[DataCallback]) -> None:
        self._point_callback = callback

    def set_imu_data_callback(self, callback: Optional[DataCallback]) -> None:
        self._imu_callback = callback

    def destroy(self) -> None:
        """Drop every callback and observer."""
        self._point_callback = None
        self._imu_callback = None
        with self._lock:
            self._observers.clear()

    def _next_observer_id(self) -> int:
        value = self._last_observer_id
        self._last_observer_id = 1 if value == _MAX_OBSERVER_ID else value + 1
        return self._last_observer_id