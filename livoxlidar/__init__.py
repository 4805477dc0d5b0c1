"""Livox lidar protocol definitions, packet and state-report decoding, data dispatch and datagram routing."""

__version__ = "0.1.0"