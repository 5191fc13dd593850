# densemap

Supporting pieces for a dense RGB-D mapping pipeline, in plain Python:
command-line configuration, reading and writing frame logs, timing, thread
helpers and small volumetric maths utilities.

## Modules

### `densemap.config`

- `parse_config(argv)` builds a `Config` dataclass from an argument list whose
  first element is the program name (defaults to `sys.argv`). Value options
  include `-c` (calibration file), `-l` (log file), `-v` (vocabulary),
  `-p` (poses), `-gpu`, `-n` (frame count), `-t` (voxel shift, default 14),
  `-cw` (weight cull, default 8), `-lt` (loop throttle, default 30),
  `-s` (volume size, default 6.0), `-dg` (sampling rate, default 0.8),
  `-il` (inlier ratio, default 0.35) and `-it` (residual threshold, default
  10.0). Switches include `-sm`, `-f`, `-od`, `-m`, `-no`, `-nos`, `-r`,
  `-ri`, `-d`, `-dc`, `-fl` and `-fod`.
  - `-od` only takes effect when a vocabulary is given; `-fl` only with online
    deformation; `incremental_mesh` is set when both `-m` and online
    deformation are on.
  - A voxel shift outside 1..16 is clamped and a message is printed.
  - `save_file` is the log file, or the resolved path of the running Python
    interpreter when no log file is given.
  - An option value that does not convert raises `ValueError`.
  - `-h` or `--help` prints the help text and raises `SystemExit(0)`.
- `usage(prog)` returns the help text.

### `densemap.logreader`

- `RawLogReader(path, width, height, *, flip_colors=False, total_num_frames=0, frame_signal=None)`
  reads a log: an int32 frame count, then per frame an int64 timestamp, the
  int32 depth and colour payload sizes, and the payloads. Payloads of the
  uncompressed size are raw; otherwise depth is zlib data and colour is an
  encoded image (JPEG when written by this package).
  - `read_next()` returns a `Frame` (`timestamp`, `depth` as `uint16`
    rows x cols, `image` as `uint8` rows x cols x 3, `is_compressed`).
  - `has_more()` and `grab_next(current_frame)`, which returns `None` once
    no frames remain or the frame limit is reached, and notifies
    `frame_signal` (a `SharedValue`) when given.
  - Usable as a context manager; `close()` closes the file.
  - Truncated or inconsistent data raises `LogFormatError` (a `ValueError`).
- `write_log(path, frames, width, height)` writes frames in the same layout;
  frames marked `is_compressed` get zlib depth and JPEG colour.

### `densemap.stopwatch`

- `Stopwatch` keeps durations in milliseconds plus raw tick and tock times in
  microseconds. `Stopwatch.instance()` returns a process-wide one.
- `add_timing`, `pulse`, `tick`, `tock`, the `measure(name)` context manager,
  `print_all(out=None)` and the `timings` property.
- `serialise()` encodes everything into one packet; `send_all()` sends it by
  UDP to 127.0.0.1:45454 at most once every 10 ms and returns whether it sent.
  `set_signature` changes the per-process signature; `close()` closes the socket.
- `current_time_us()` returns wall-clock time in microseconds.

### `densemap.sync` and `densemap.worker`

- `SharedValue` holds one value under a lock: `assign`, `get`, `get_after`,
  `increment`, `add`, `assign_and_notify_all`, `notify_all` and
  `wait_for_signal(timeout)`, which raises `TimeoutError` if no signal comes.
- `Worker(identifier, stopwatch=None)` is a base class: subclasses override
  `process()`; `start()` loops in the calling thread until `process()` returns
  `False` or `stop()` is called; `running()` reports whether the loop is active.

### Maths

- `densemap.vecmath`: `Vec3`, `dot`, `cross`, `norm`, `normalized`,
  `normalized_safe`, `mat_vec`, and fixed-point TSDF packing with
  `pack_tsdf`, `unpack_tsdf` and `clear_tsdf`.
- `densemap.intrinsics`: `Intrinsics` with `at_level(level)` for image
  pyramids, the `JtJJtrSE3` accumulator with `add`, and `div_up`.
- `densemap.limits`: `limits_for(type_name)` returns `NumericLimits` for C
  scalar types such as `"unsigned short"` or `"float"`.
- `densemap.warp`: `scan_warp` with `ScanKind`, `lane_mask_le`,
  `lane_mask_lt`, `binary_incl_scan`, `binary_excl_scan` and `warp_reduce`,
  modelling 32-lane warp operations on plain lists.

## Examples

```python
from densemap.config import parse_config

config = parse_config(
    ["densemap", "-s", "7", "-v", "vocab.yml.gz", "-l", "loop.klg", "-ri", "-fl", "-od"]
)
print(config.volume_size, config.online_deformation, config.fast_loops)
```

```python
from densemap.logreader import RawLogReader

with RawLogReader("loop.klg", 640, 480) as reader:
    while (frame := reader.grab_next(reader.current_frame)) is not None:
        print(frame.timestamp, frame.depth.max())
```

```python
from densemap.stopwatch import Stopwatch

watch = Stopwatch.instance()
with watch.measure("integrate"):
    ...  # work to be timed
watch.print_all()
```

```python
from densemap.vecmath import Vec3, cross, dot, pack_tsdf, unpack_tsdf
from densemap.intrinsics import Intrinsics, div_up

z = cross(Vec3(1.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
assert dot(z, z) == 1.0
print(pack_tsdf(0.5), unpack_tsdf(pack_tsdf(0.5)))

print(Intrinsics(528.0, 528.0, 320.0, 240.0).at_level(1), div_up(640, 32))
```

## What it does not do

This package has no camera tracking, volume fusion, loop closure, mesh
generation, live sensor capture or viewer, and it installs no command.
It supplies the configuration, log input, timing, threading and maths pieces
that such a pipeline is built around.

## Requirements

Python 3.10 or later, with `numpy` and `pillow`. Tests use `pytest`.