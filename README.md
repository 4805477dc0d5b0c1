# livoxlidar

Pure-Python building blocks for the Livox lidar network protocol: the
protocol's enumerations and fixed-layout records, point-cloud and command
packet decoding, decoding of the key/value state report into a dataclass or
JSON text, dispatch of data packets to callbacks, discovery of a lidar's data
ports from its internal-info response, and classification of received
datagrams by sender and port.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Modules

### `livoxlidar.definitions`

- Enumerations (`IntEnum`): `DeviceType`, `ParamKey`, `PointDataType`,
  `LogType`, `LivoxStatus`, `ScanPattern`, `FrameRate`, `WorkMode`,
  `WorkModeAfterBoot`, `DetectMode`, `GlassHeat`, `UpgradeFsmState`,
  `UpgradeFsmEvent`.
- `get_sdk_version()` returns an `SdkVersion(major, minor, patch)`; its
  `str()` is `"1.2.5"`.
- `check_status(status)` returns `LivoxStatus.SUCCESS` for a success status
  and raises `LivoxError` for any other. `LivoxError.status` holds the status,
  as a `LivoxStatus` where the value is a known one.
- Little-endian records with `pack()` and `unpack(data)`: `InstallAttitude`
  (roll, pitch, yaw in degrees; x, y, z in millimetres), `FovCfg` and
  `FuncIOCfg`. `unpack` raises `ValueError` when given too few bytes.

### `livoxlidar.packets`

- `EthernetPacket.parse(data)` reads a point-cloud or IMU packet (36-byte
  header followed by the payload); `pack()` writes it back.
  `EthernetPacket.points()` decodes `dot_num` points of the packet's
  `data_type`.
- `decode_points(data_type, payload, count)` returns `CartesianHighPoint`,
  `CartesianLowPoint`, `SphericalPoint` or `ImuPoint` named tuples. It raises
  `ValueError` for an unknown data type, a negative count or a short payload.
- `CmdPacket.parse(data)` and `CmdPacket.pack()` handle the control frame
  header and its payload.

### `livoxlidar.state_info`

`parse_state_info(data)` decodes a state payload (key count, two reserved
bytes, then key/value records) into a `LidarStateInfo` and returns it together
with the set of `ParamKey`s the payload carried. Unknown keys are skipped;
a truncated payload raises `ValueError`. Address settings are decoded into
`LidarIpCfg` and `IpCfg`.

### `livoxlidar.state_json`

- `state_info_to_dict(info, keys)` returns the fields named by `keys` in
  report order, under the report's field names.
- `state_info_to_json(info, keys)` renders the same as JSON indented by four
  spaces.
- `parse_push_message(data)` goes straight from a state payload to JSON text.

```python
import struct
from livoxlidar.state_json import parse_push_message

# one record: key 0x0000 (point data type), length 1, value 1
payload = struct.pack("<HHHHB", 1, 0, 0x0000, 1, 1)
print(parse_push_message(payload))
# {
#     "pcl_data_type": 1
# }
```

### `livoxlidar.data_handler`

`DataHandler` hands each packet to the IMU callback (for IMU packets) or the
point callback (for all others), then to every observer. `handle(dev_type,
handle, data)` accepts raw bytes or an `EthernetPacket`; `None` is ignored.
Callbacks are called as `callback(handle, dev_type, packet)`.

```python
from livoxlidar.data_handler import DataHandler

handler = DataHandler()

def on_points(handle, dev_type, packet):
    for point in packet.points():
        print(point)

handler.set_point_data_callback(on_points)
observer_id = handler.add_point_cloud_observer(lambda h, t, p: None)

# datagram: raw bytes received on the point data port
# handler.handle(dev_type, handle, datagram)

handler.remove_point_cloud_observer(observer_id)
handler.destroy()  # drops every callback and observer
```

Observer ids start at 2 and wrap from 65535 back to 1.

### `livoxlidar.view_info`

- `handle_to_ip(handle)` and `ip_to_handle(ip)` convert between a device
  handle (the address bytes in wire order, read as a little-endian integer)
  and a dotted IPv4 address.
- `parse_view_lidar_info(handle, dev_type, cmd_port, host_ip, data)` reads an
  internal-info response and returns a `ViewLidarInfo` with the host and lidar
  ports for point and IMU data. For a Mid-360 the lidar ports are always
  56300 and 56400. A non-zero return code raises `LivoxError`; a truncated
  response raises `ValueError`.

### `livoxlidar.routing`

`LidarRouter(host_ip, detection_port, fault_port)` classifies a datagram with
`route(handle, port)` as a `Route`: `DATA`, `COMMAND`, `DETECTION` or
`IGNORE`. Lidars with known ports are registered with
`add_lidar(handle, dev_type, LidarNetPorts(...))`. Datagrams from `host_ip`
itself are ignored. `register_device_type(handle, dev_type)` returns `True`
for a new lidar, `False` for a known one, and raises `ValueError` when the
type differs from the one recorded; `device_type(handle)` returns 0 for an
unknown lidar. `channel_key(host_ip, port)` gives the `"ip:port"` key of a
host socket. `clear()` forgets everything.

## What it does not do

The package works on bytes and values only. It opens no sockets, sends no
broadcast detection and no commands, keeps no I/O threads, and does not read
configuration files. Setting lidar parameters, firmware upgrade, log
collection and recording of debug point clouds are not part of it: receive
datagrams with your own networking code and pass them to `LidarRouter`,
`DataHandler` and the parsers above.

## Running the tests

```
pip install -e .[test]
pytest
```