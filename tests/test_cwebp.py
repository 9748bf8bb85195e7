from pathlib import Path

import pytest

from webp_converter.cwebp import (
    CwebpError,
    CwebpTimeout,
    CwebpUnavailable,
    build_command,
    build_cwebp_args,
    convert_to_webp,
)
from webp_shared.options import ConversionOptions


@pytest.mark.parametrize("quality", [0, 1, 50, 80, 100])
@pytest.mark.parametrize("compression_level", [0, 6, 9])
@pytest.mark.parametrize("method", [0, 4, 6])
def test_args_carry_exact_values(quality, compression_level, method):
    options = ConversionOptions(
        quality=quality, compression_level=compression_level, method=method
    )
    args = build_cwebp_args(options)
    assert args[args.index("-q") + 1] == str(quality)
    assert args[args.index("-z") + 1] == str(compression_level)
    assert args[args.index("-m") + 1] == str(method)
    assert args[args.index("-near_lossless") + 1] == "100"


def test_default_args():
    assert build_cwebp_args(ConversionOptions()) == [
        "-q", "80", "-near_lossless", "100", "-z", "6", "-m", "4",
    ]


def test_lossless_flag_only_when_requested():
    assert "-lossless" not in build_cwebp_args(ConversionOptions())
    assert "-lossless" in build_cwebp_args(ConversionOptions(lossless=True))


def test_preset_only_when_set_and_first():
    assert "-preset" not in build_cwebp_args(ConversionOptions())
    args = build_cwebp_args(ConversionOptions(preset="photo", lossless=True))
    assert args[:3] == ["-preset", "photo", "-lossless"]


def test_paths_come_last():
    cmd = build_command(Path("/tmp/in.png"), Path("/out/cat.webp"), ConversionOptions(), "cwebp")
    assert cmd[0] == "cwebp"
    assert cmd[-3:] == ["/tmp/in.png", "-o", "/out/cat.webp"]


def test_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        convert_to_webp(tmp_path / "nope.png", tmp_path / "out.webp", ConversionOptions())


def test_missing_binary_raises_unavailable(tmp_path):
    src = tmp_path / "in.png"
    src.write_bytes(b"x")
    with pytest.raises(CwebpUnavailable):
        convert_to_webp(
            src, tmp_path / "out.webp", ConversionOptions(),
            binary=str(tmp_path / "no-such-cwebp"),
        )


def test_failure_captures_stderr(tmp_path, make_fake_cwebp):
    fake = make_fake_cwebp(exit_code=255, stderr="Could not process file input\n")
    src = tmp_path / "in.png"
    src.write_bytes(b"x")
    with pytest.raises(CwebpError) as exc_info:
        convert_to_webp(src, tmp_path / "out.webp", ConversionOptions(), binary=str(fake.path))
    assert exc_info.value.returncode == 255
    assert "Could not process file input" in exc_info.value.stderr
    assert not (tmp_path / "out.webp").exists()


def test_timeout_raises(tmp_path, make_fake_cwebp):
    fake = make_fake_cwebp(sleep=5.0)
    src = tmp_path / "in.png"
    src.write_bytes(b"x")
    with pytest.raises(CwebpTimeout):
        convert_to_webp(
            src, tmp_path / "out.webp", ConversionOptions(),
            binary=str(fake.path), timeout=0.5,
        )


def test_success_passes_options_to_tool(tmp_path, fake_cwebp, fake_header):
    src = tmp_path / "in.png"
    src.write_bytes(b"pixels")
    out = tmp_path / "out.webp"
    convert_to_webp(src, out, ConversionOptions(quality=90, preset="text"), binary=str(fake_cwebp.path))

    assert out.read_bytes() == fake_header + b"pixels"
    [call] = fake_cwebp.calls()
    assert call == [
        "-preset", "text", "-q", "90", "-near_lossless", "100", "-z", "6", "-m", "4",
        str(src), "-o", str(out),
    ]
