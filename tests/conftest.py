"""Shared fixtures: a fake cwebp executable, configs and a Flask test client."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

from webp_api import Config, create_app

API_KEY = "test-secret"

# Stands in for cwebp: logs its argv, then writes FAKE_HEADER + input bytes
# to the path after "-o".
FAKE_CWEBP_TEMPLATE = """#!{python}
import json, sys, time
args = sys.argv[1:]
with open({log!r}, "a") as log:
    log.write(json.dumps(args) + "\\n")
time.sleep({sleep!r})
if {exit_code!r}:
    sys.stderr.write({stderr!r})
    sys.exit({exit_code!r})
src, flag, dst = args[-3:]
assert flag == "-o", args
with open(src, "rb") as fin, open(dst, "wb") as fout:
    fout.write({header!r} + fin.read())
"""

FAKE_HEADER = b"RIFF\x00\x00\x00\x00WEBPVP8 "

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@dataclass
class FakeCwebp:
    path: Path
    log: Path

    def calls(self) -> list[list[str]]:
        if not self.log.exists():
            return []
        return [json.loads(line) for line in self.log.read_text().splitlines()]


@pytest.fixture
def make_fake_cwebp(tmp_path: Path):
    def _make(exit_code: int = 0, stderr: str = "", sleep: float = 0.0, name: str = "cwebp"):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / name
        log = bin_dir / f"{name}.calls.jsonl"
        script.write_text(FAKE_CWEBP_TEMPLATE.format(
            python=sys.executable,
            log=str(log),
            sleep=sleep,
            exit_code=exit_code,
            stderr=stderr,
            header=FAKE_HEADER,
        ))
        script.chmod(0o755)
        return FakeCwebp(path=script, log=log)
    return _make


@pytest.fixture
def fake_cwebp(make_fake_cwebp) -> FakeCwebp:
    return make_fake_cwebp()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "img_webp"


@pytest.fixture
def config(output_dir: Path, fake_cwebp: FakeCwebp) -> Config:
    return Config(
        output_dir=output_dir,
        retention_hours=0,
        max_image_mb=1,
        api_key=API_KEY,
        cwebp_bin=str(fake_cwebp.path),
        convert_workers=2,
    )


@pytest.fixture
def app(config: Config):
    app = create_app(config)
    app.config["TESTING"] = True
    yield app
    app.config["retention_sweeper"].stop()
    app.config["conversion_service"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": API_KEY}


@pytest.fixture
def multipart():
    """Build a raw multipart/form-data body from (name, filename, content) parts."""
    def _build(parts, boundary: str = "test-boundary-1234"):
        body = bytearray()
        for name, filename, content in parts:
            body += f"--{boundary}\r\n".encode()
            disposition = f'form-data; name="{name}"'
            if filename is not None:
                disposition += f'; filename="{filename}"'
            body += f"Content-Disposition: {disposition}\r\n".encode()
            if filename is not None:
                body += b"Content-Type: application/octet-stream\r\n"
            body += b"\r\n" + content + b"\r\n"
        body += f"--{boundary}--\r\n".encode()
        return bytes(body), f"multipart/form-data; boundary={boundary}"
    return _build


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def fake_header() -> bytes:
    return FAKE_HEADER
