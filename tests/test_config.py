import os
import sys

import pytest

from densemap.config import Config, parse_config, usage


def test_defaults_without_options():
    cfg = parse_config(["prog"])
    assert cfg.gpu == 0
    assert cfg.voxel_shift == 14
    assert cfg.weight_cull == 8
    assert cfg.loop_throttle == 30
    assert cfg.volume_size == pytest.approx(6.0)
    assert cfg.dense_sampling_rate == pytest.approx(0.8)
    assert cfg.inlier_ratio == pytest.approx(0.35)
    assert cfg.isam_thresh == pytest.approx(10.0)
    assert cfg.extract_overlap is True
    assert cfg.save_overlap is True
    assert cfg.online_deformation is False


def test_defaults_match_dataclass_defaults():
    cfg = parse_config(["prog", "-l", "x.klg"])
    expected = Config(log_file="x.klg", save_file="x.klg")
    assert cfg == expected


def test_documented_example_command_line():
    argv = ["prog", "-s", "7", "-v", "../vocab.yml.gz", "-l", "loop.klg", "-ri", "-fl", "-od"]
    cfg = parse_config(argv)
    assert cfg.volume_size == pytest.approx(7.0)
    assert cfg.vocab_file == "../vocab.yml.gz"
    assert cfg.log_file == "loop.klg"
    assert cfg.use_rgbd_icp is True
    assert cfg.online_deformation is True
    assert cfg.fast_loops is True
    assert cfg.save_file == "loop.klg"


def test_online_deformation_requires_vocabulary():
    cfg = parse_config(["prog", "-od", "-fl", "-m"])
    assert cfg.online_deformation is False
    assert cfg.fast_loops is False
    assert cfg.incremental_mesh is False
    assert cfg.enable_mesh_generator is True


def test_incremental_mesh_needs_mesh_and_deformation():
    cfg = parse_config(["prog", "-v", "voc", "-od", "-m"])
    assert cfg.incremental_mesh is True


def test_overlap_switches_invert():
    cfg = parse_config(["prog", "-no", "-nos"])
    assert cfg.extract_overlap is False
    assert cfg.save_overlap is False


def test_simple_switches():
    cfg = parse_config(["prog", "-sm", "-f", "-r", "-d", "-dc", "-fod"])
    assert cfg.static_mode and cfg.flip_colors and cfg.use_rgbd
    assert cfg.dynamic_cube and cfg.disable_color_angle_weight and cfg.fast_odometry
    assert cfg.use_rgbd_icp is False


def test_numeric_options():
    cfg = parse_config(["prog", "-gpu", "2", "-n", "100", "-cw", "3", "-lt", "5",
                        "-dg", "0.5", "-il", "0.25", "-it", "4"])
    assert (cfg.gpu, cfg.total_num_frames, cfg.weight_cull, cfg.loop_throttle) == (2, 100, 3, 5)
    assert cfg.dense_sampling_rate == pytest.approx(0.5)
    assert cfg.inlier_ratio == pytest.approx(0.25)
    assert cfg.isam_thresh == pytest.approx(4.0)


def test_voxel_shift_is_clamped_high(capsys):
    cfg = parse_config(["prog", "-t", "40"])
    assert cfg.voxel_shift == 16
    assert "correcting to 16" in capsys.readouterr().out


def test_voxel_shift_is_clamped_low(capsys):
    cfg = parse_config(["prog", "-t", "0"])
    assert cfg.voxel_shift == 1
    assert "correcting to 1" in capsys.readouterr().out


def test_option_without_value_keeps_default():
    cfg = parse_config(["prog", "-t"])
    assert cfg.voxel_shift == 14


def test_invalid_number_raises():
    with pytest.raises(ValueError):
        parse_config(["prog", "-gpu", "abc"])


def test_empty_argv_raises():
    with pytest.raises(ValueError):
        parse_config([])


def test_save_file_defaults_to_executable():
    cfg = parse_config(["prog"])
    assert cfg.save_file == os.path.realpath(sys.executable)


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help_prints_usage_and_exits(flag, capsys):
    with pytest.raises(SystemExit) as info:
        parse_config(["tool", flag])
    assert info.value.code == 0
    assert capsys.readouterr().out.strip() == usage("tool").strip()


def test_usage_text():
    text = usage("tool")
    assert text.startswith("Usage: tool [Options]\nKintinuous dense mapping system")
    assert text.endswith("Example: tool -s 7 -v ../vocab.yml.gz -l loop.klg -ri -fl -od")