"""Tests for burrow.server.upgrade — tunnel hand-off and refused upgrades."""

from pathlib import Path
from typing import Any

import pytest

from burrow.app import Gateway
from burrow.config import GatewayConfig, default_mounts
from burrow.server.upgrade import gated_websocket_protocol, handle_upgrade, request_target
from burrow.testing import TestClient


class RecordingTunnel:
    """Accepts the connection, echoes every binary frame, records what it saw."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.received: list[dict[str, Any]] = []

    async def __call__(self, scope, receive, send) -> None:
        self.calls.append(scope)
        message = await receive()
        self.received.append(message)
        await send({"type": "websocket.accept"})
        while True:
            message = await receive()
            self.received.append(message)
            if message["type"] == "websocket.disconnect":
                return
            await send({"type": "websocket.send", "bytes": message["bytes"]})


@pytest.fixture
def tunnel() -> RecordingTunnel:
    return RecordingTunnel()


@pytest.fixture
def tunneled(assets: Path, tunnel: RecordingTunnel) -> Gateway:
    return Gateway(GatewayConfig(mounts=default_mounts(assets)), tunnel=tunnel)


class TestTunnelHandoff:
    async def test_wisp_upgrade_forwarded_once(self, tunneled: Gateway, tunnel: RecordingTunnel) -> None:
        async with TestClient(tunneled) as client:
            result = await client.websocket("/wisp/")

        assert len(tunnel.calls) == 1
        assert tunnel.calls[0]["path"] == "/wisp/"
        assert result.accepted
        assert not any(m["type"].startswith("http.") for m in result.messages)

    async def test_buffered_frames_reach_tunnel_intact(
        self, tunneled: Gateway, tunnel: RecordingTunnel
    ) -> None:
        frames = [b"\x02\x00\x00\x00\x00hello", b"\x00" * 1024]
        async with TestClient(tunneled) as client:
            result = await client.websocket("/wisp/", frames=frames)

        assert tunnel.received[0] == {"type": "websocket.connect"}
        assert [m["bytes"] for m in tunnel.received[1:-1]] == frames
        echoed = [m["bytes"] for m in result.messages if m["type"] == "websocket.send"]
        assert echoed == frames

    async def test_suffix_match_under_a_prefix(self, tunneled: Gateway, tunnel: RecordingTunnel) -> None:
        async with TestClient(tunneled) as client:
            result = await client.websocket("/service/wisp/")
        assert result.accepted
        assert len(tunnel.calls) == 1

    async def test_custom_suffix(self, assets: Path, tunnel: RecordingTunnel) -> None:
        gateway = Gateway(
            GatewayConfig(mounts=default_mounts(assets), upgrade_suffix="/tunnel/"),
            tunnel=tunnel,
        )
        async with TestClient(gateway) as client:
            refused = await client.websocket("/wisp/")
            accepted = await client.websocket("/tunnel/")
        assert refused.closed_before_accept
        assert accepted.accepted


class TestRefusedUpgrades:
    @pytest.mark.parametrize("path", ["/other/", "/wisp", "/wisp/extra", "/uv/sw.js", "/"])
    async def test_non_matching_path_is_closed(
        self, tunneled: Gateway, tunnel: RecordingTunnel, path: str
    ) -> None:
        async with TestClient(tunneled) as client:
            result = await client.websocket(path)

        assert result.messages == ({"type": "websocket.close"},)
        assert tunnel.calls == []

    async def test_no_tunnel_configured_closes(self, gateway: Gateway) -> None:
        async with TestClient(gateway) as client:
            result = await client.websocket("/wisp/")
        assert result.closed_before_accept

    async def test_raw_path_decides_match(self, tunnel: RecordingTunnel) -> None:
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "websocket.connect"}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        # Decoded path ends with the suffix, the bytes on the wire do not
        scope = {"type": "websocket", "path": "/wisp/", "raw_path": b"/wisp%2F"}
        await handle_upgrade(scope, receive, send, suffix="/wisp/", tunnel=tunnel)

        assert sent == [{"type": "websocket.close"}]
        assert tunnel.calls == []


class TestRequestTarget:
    def test_origin_form(self) -> None:
        assert request_target(b"GET /x/wisp/ HTTP/1.1\r\nHost: a\r\n\r\n") == "/x/wisp/"

    def test_query_dropped(self) -> None:
        assert request_target(b"GET /wisp/?v=2 HTTP/1.1\r\n\r\n") == "/wisp/"

    def test_absolute_form_keeps_suffix(self) -> None:
        assert request_target(b"GET ws://host/wisp/ HTTP/1.1\r\n\r\n").endswith("/wisp/")

    @pytest.mark.parametrize("head", [b"", b"garbage\r\n\r\n", b"GET /a b HTTP/1.1\r\n"])
    def test_malformed_request_line(self, head: bytes) -> None:
        assert request_target(head) == ""


class TestGatedProtocol:
    def test_builds_on_uvicorn_auto_protocol(self) -> None:
        from uvicorn.protocols.websockets.auto import AutoWebSocketsProtocol

        protocol_class = gated_websocket_protocol(lambda target: True)
        assert issubclass(protocol_class, AutoWebSocketsProtocol)
