"""Tests for the MCP server tools."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from artnet_mcp.protocol.command import into_buffer
from artnet_mcp.protocol.output import Output
from artnet_mcp.protocol.timecode import Timecode


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("artnet_mcp.server", None)
            import artnet_mcp.server as server_mod

    return server_mod


def test_send_dmx_sequences_per_universe():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.send.return_value = 20

    with patch.object(server, "_get_connection", return_value=mock_conn):
        first = server.send_dmx(1, [255])
        second = server.send_dmx(1, [255])
        other = server.send_dmx(2, [255])

    assert first["sequence"] == 1
    assert second["sequence"] == 2
    assert other["sequence"] == 1
    sent = mock_conn.send.call_args_list[0].args[0]
    assert isinstance(sent, Output)
    assert bytes(sent.data) == b"\xFF"


def test_sequence_wraps_to_one():
    server = _get_server_module()
    server._sequences[5] = 255
    assert server._next_sequence(5) == 1


def test_failed_send_keeps_sequence():
    """A rejected frame does not use up a sequence number."""
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.send.side_effect = lambda command: len(into_buffer(command))
    with patch.object(server, "_get_connection", return_value=mock_conn):
        first = server.send_dmx(1, [255])
        failed = server.send_dmx(1, [0] * 513)
        second = server.send_dmx(1, [255])
    assert "error" in failed
    assert first["sequence"] == 1
    assert second["sequence"] == 2


def test_invalid_address_leaves_no_sequence():
    server = _get_server_module()
    mock_conn = MagicMock()
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.send_dmx(40000, [0])
    assert "error" in result
    assert 40000 not in server._sequences
    mock_conn.send.assert_not_called()


def test_send_dmx_unsequenced():
    server = _get_server_module()
    mock_conn = MagicMock()
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.send_dmx(1, [1, 2], sequenced=False)
    assert result["sequence"] == 0


def test_send_dmx_reports_codec_errors():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.send.side_effect = lambda command: len(into_buffer(command))
    with patch.object(server, "_get_connection", return_value=mock_conn):
        too_long = server.send_dmx(1, [0] * 513)
        bad_address = server.send_dmx(40000, [0])
    assert "error" in too_long
    assert "error" in bad_address


def test_blackout_sends_zeros():
    server = _get_server_module()
    mock_conn = MagicMock()
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.blackout(3, channels=24)
    assert result["channels"] == 24
    sent = mock_conn.send.call_args.args[0]
    assert bytes(sent.data) == bytes(24)


def test_blackout_channel_range():
    server = _get_server_module()
    assert "error" in server.blackout(3, channels=0)


def test_send_timecode():
    server = _get_server_module()
    mock_conn = MagicMock()
    with patch.object(server, "_get_connection", return_value=mock_conn):
        result = server.send_timecode(1, 2, 3, 4)
    assert result["timecode"] == "01:02:03:04"
    sent = mock_conn.send.call_args.args[0]
    assert isinstance(sent, Timecode)
    assert sent.key_type == 3


def test_receive_packet_timeout():
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.receive.return_value = None
    with patch.object(server, "_get_connection", return_value=mock_conn):
        assert "error" in server.receive_packet()


def test_encode_and_decode_packet():
    server = _get_server_module()
    encoded = server.encode_dmx(1, [255])
    assert encoded["size"] == 20
    decoded = server.decode_packet(encoded["hex"])
    assert decoded["opcode"] == "OUTPUT"
    assert decoded["port_address"] == 1
    assert decoded["length"] == 2
    assert decoded["data"] == [255, 0]
    assert decoded["version"] == 14


def test_decode_timecode_packet():
    server = _get_server_module()
    packet = into_buffer(Timecode(hours=10, key_type=1))
    decoded = server.decode_packet(packet.hex())
    assert decoded["timecode"] == "10:00:00:00"
    assert decoded["frame_rate"] == 25.0


def test_decode_packet_errors():
    server = _get_server_module()
    assert "error" in server.decode_packet("zz")
    assert "error" in server.decode_packet(b"Art-Net\x00\x00\x20".hex())


def test_opcodes_resource():
    server = _get_server_module()
    data = json.loads(server.resource_opcodes())
    assert data["protocol_version"] == 14
    assert data["opcodes"] == {"OUTPUT": "0x5000", "TIMECODE": "0x9700"}


def test_tools_require_connection():
    server = _get_server_module()
    server._connection = None
    with pytest.raises(RuntimeError, match="connect"):
        server.send_dmx(1, [0])
