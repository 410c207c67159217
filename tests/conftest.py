"""Shared fixtures: a temporary asset tree laid out like a real deployment."""

from pathlib import Path

import pytest

from burrow.app import Gateway
from burrow.config import GatewayConfig, default_mounts


@pytest.fixture
def assets(tmp_path: Path) -> Path:
    """Three bundles plus a sibling directory that must never be reachable."""
    root = tmp_path / "assets"
    uv = root / "uv"
    epoxy = root / "epoxy"
    baremux = root / "baremux"
    for directory in (uv, epoxy, baremux):
        directory.mkdir(parents=True)

    (uv / "uv.bundle.js").write_text("self.__uv$bundle = {};")
    (uv / "uv.config.js").write_text("self.__uv$config = {prefix: '/service/'};")
    (uv / "sw.js").write_text("importScripts('uv.bundle.js');")
    (uv / "with space.txt").write_text("spaced")
    (uv / "nested").mkdir()
    (uv / "nested" / "deep.css").write_text("body { margin: 0; }")
    (epoxy / "index.mjs").write_text("export default {};")
    (epoxy / "epoxy.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00")
    (baremux / "worker.js").write_text("onconnect = () => {};")
    (baremux / "blob.unknownext").write_bytes(bytes(range(256)))

    evil = root / "uv-evil"
    evil.mkdir()
    (evil / "secret.txt").write_text("top secret")
    (root / "secret.txt").write_text("outside every mount")
    return root


@pytest.fixture
def gateway(assets: Path) -> Gateway:
    return Gateway(GatewayConfig(mounts=default_mounts(assets)))
