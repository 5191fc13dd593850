"""Command-line configuration for the dense mapping pipeline."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

MIN_VOXEL_SHIFT = 1
MAX_VOXEL_SHIFT = 16

_T = TypeVar("_T")


@dataclass
class Config:
    """Settings taken from the command line."""

    calibration_file: str = ""
    log_file: str = ""
    vocab_file: str = ""
    trajectory_file: str = ""

    gpu: int = 0
    voxel_shift: int = 14
    total_num_frames: int = 0
    weight_cull: int = 8
    loop_throttle: int = 30

    volume_size: float = 6.0
    dense_sampling_rate: float = 0.8
    inlier_ratio: float = 0.35
    isam_thresh: float = 10.0

    static_mode: bool = False
    flip_colors: bool = False
    enable_mesh_generator: bool = False
    extract_overlap: bool = True
    save_overlap: bool = True
    use_rgbd: bool = False
    use_rgbd_icp: bool = False
    dynamic_cube: bool = False
    online_deformation: bool = False
    disable_color_angle_weight: bool = False
    incremental_mesh: bool = False
    fast_loops: bool = False
    fast_odometry: bool = False

    save_file: str = ""


# (flag, field, converter, metavar, help)
_VALUE_OPTIONS: tuple[tuple[str, str, Callable[[str], Any], str, str], ...] = (
    ("-c", "calibration_file", str, "calibration",
     "camera calibration, either an OpenCV depth_intrinsics matrix (.yml/.xml) "
     "or a text file holding fx fy cx cy, optionally followed by w h"),
    ("-l", "log_file", str, "logfile", "read frames from this .klg log"),
    ("-v", "vocab_file", str, "vocab", "place recognition vocabulary to load"),
    ("-p", "trajectory_file", str, "poses", "use these ground truth poses instead of tracking"),
    ("-gpu", "gpu", int, "gpu", "index of the CUDA device to use"),
    ("-n", "total_num_frames", int, "number", "how many frames to process"),
    ("-t", "voxel_shift", int, "threshold", "voxel distance that triggers a volume shift, default 14"),
    ("-cw", "weight_cull", int, "weight", "drop voxels under this weight in extracted slices, default 8"),
    ("-lt", "loop_throttle", int, "throttle", "seconds to wait between loop closures, default 30"),
    ("-s", "volume_size", float, "size", "edge length of the fusion volume in metres, default 6"),
    ("-dg", "dense_sampling_rate", float, "sampling", "pose sampling distance for deformation, default 0.8"),
    ("-il", "inlier_ratio", float, "inliers", "RANSAC inlier threshold, default 0.35"),
    ("-it", "isam_thresh", float, "isam", "pose graph residual threshold, default 10"),
)

_SWITCH_HELP: tuple[tuple[str, str], ...] = (
    ("-sm", "static mode, the volume never shifts"),
    ("-f", "swap red and blue channels"),
    ("-od", "deform the map online, needed for loop closure"),
    ("-m", "generate meshes"),
    ("-no", "extract slices without overlap"),
    ("-nos", "strip overlap from the saved map"),
    ("-r", "track with RGB only"),
    ("-ri", "track with ICP and RGB together"),
    ("-d", "position the cube dynamically"),
    ("-dc", "do not weight colour by viewing angle"),
    ("-fl", "subsample the pose graph for quicker loop closure"),
    ("-fod", "use fast odometry"),
)


def usage(prog: str) -> str:
    """Return the help text for the program named ``prog``."""
    lines = [f"Usage: {prog} [Options]", "Dense mapping system", "", "Options:"]
    lines += [f"    {flag} <{metavar}> : {text}" for flag, _, _, metavar, text in _VALUE_OPTIONS]
    lines += [f"    {flag} : {text}" for flag, text in _SWITCH_HELP]
    lines += [
        "    -h, --help : show this help and exit",
        "",
        f"Example: {prog} -s 7 -v ../vocab.yml.gz -l loop.klg -ri -fl -od",
    ]
    return "\n".join(lines)


def _find_switch(args: Sequence[str], name: str) -> bool:
    return name in args[1:]


def _find_value(
    args: Sequence[str], name: str, convert: Callable[[str], _T], default: _T
) -> _T:
    """Return the converted argument after the first ``name``, or ``default``."""
    try:
        index = list(args).index(name, 1)
    except ValueError:
        return default
    if index >= len(args) - 1:
        return default
    raw = args[index + 1]
    try:
        return convert(raw)
    except ValueError as exc:
        raise ValueError(f"invalid value {raw!r} for option {name}") from exc


def parse_config(argv: Sequence[str] | None = None) -> Config:
    """Build a :class:`Config` from ``argv`` (program name first).

    Prints the help text and raises ``SystemExit(0)`` on ``-h`` or ``--help``.
    """
    args = list(sys.argv if argv is None else argv)
    if not args:
        raise ValueError("argv must contain at least the program name")

    if _find_switch(args, "-h") or _find_switch(args, "--help"):
        print(usage(args[0]))
        raise SystemExit(0)

    defaults = Config()
    cfg = Config(**{
        field: _find_value(args, flag, convert, getattr(defaults, field))
        for flag, field, convert, _, _ in _VALUE_OPTIONS
    })

    cfg.static_mode = _find_switch(args, "-sm")
    cfg.flip_colors = _find_switch(args, "-f")
    cfg.online_deformation = _find_switch(args, "-od") and bool(cfg.vocab_file)
    cfg.enable_mesh_generator = _find_switch(args, "-m")
    cfg.extract_overlap = not _find_switch(args, "-no")
    cfg.save_overlap = not _find_switch(args, "-nos")
    cfg.use_rgbd = _find_switch(args, "-r")
    cfg.use_rgbd_icp = _find_switch(args, "-ri")
    cfg.dynamic_cube = _find_switch(args, "-d")
    cfg.disable_color_angle_weight = _find_switch(args, "-dc")
    cfg.fast_loops = _find_switch(args, "-fl") and cfg.online_deformation
    cfg.incremental_mesh = cfg.enable_mesh_generator and cfg.online_deformation
    cfg.fast_odometry = _find_switch(args, "-fod")

    if not MIN_VOXEL_SHIFT <= cfg.voxel_shift <= MAX_VOXEL_SHIFT:
        cfg.voxel_shift = max(MIN_VOXEL_SHIFT, min(cfg.voxel_shift, MAX_VOXEL_SHIFT))
        print(f"Voxel shift must between 1 and 16, correcting to {cfg.voxel_shift}")

    cfg.save_file = cfg.log_file if cfg.log_file else os.path.realpath(sys.executable)
    return cfg