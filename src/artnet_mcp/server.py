"""MCP server entry point for Art-Net lighting control.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .protocol.command import COMMANDS, from_buffer, into_buffer
from .protocol.constants import ARTNET_PROTOCOL_VERSION
from .protocol.errors import ArtNetError
from .protocol.output import MAX_DMX_CHANNELS, Output
from .protocol.port_address import MAX_PORT_ADDRESS, PortAddress
from .protocol.timecode import KeyType, Timecode
from .transport.udp_connection import (
    ART_NET_PORT,
    DEFAULT_BIND,
    DEFAULT_TARGET,
    READ_TIMEOUT_MS,
    UDPConnection,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "artnet",
    instructions="Send DMX512 channel data and timecode to lighting nodes over Art-Net.",
)

# Global connection state
_connection: UDPConnection | None = None
_sequences: dict[int, int] = {}


def _get_connection() -> UDPConnection:
    """Get the active UDP connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected. Use the 'connect' tool first."
        )
    return _connection


def _next_sequence(port_address: int) -> int:
    """Per-universe sequence number cycling 1-255 (0 means disabled).

    Not recorded until the packet using it has been sent.
    """
    return _sequences.get(port_address, 0) % 0xFF + 1


def _describe(command: Output | Timecode) -> dict[str, Any]:
    """Convert a parsed command to a JSON-serializable dictionary."""
    if isinstance(command, Output):
        return {
            "opcode": "OUTPUT",
            "version": int.from_bytes(command.version, "big"),
            "sequence": command.sequence,
            "physical": command.physical,
            "port_address": int(command.port_address),
            "net": command.port_address.net,
            "sub_net": command.port_address.sub_net,
            "universe": command.port_address.universe,
            "length": int(command.length),
            "data": list(bytes(command.data)),
        }
    return {
        "opcode": "TIMECODE",
        "version": int.from_bytes(command.version, "big"),
        "stream_id": command.stream_id,
        "timecode": str(command),
        "key_type": command.key_type,
        "frame_rate": command.frame_rate,
    }


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(
    target: str = DEFAULT_TARGET,
    port: int = ART_NET_PORT,
    bind: str = DEFAULT_BIND,
    broadcast: bool = True,
) -> dict[str, Any]:
    """Open the Art-Net UDP socket.

    Args:
        target: Node IP address, or a broadcast address (default 255.255.255.255).
        port: UDP port (default 6454).
        bind: Local address to listen on.
        broadcast: Enable sending to broadcast addresses.
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "target": _connection.info.target,
        }

    _connection = UDPConnection(target, port, bind, broadcast)
    info = _connection.open()
    return {
        "connected": True,
        "target": info.target,
        "port": info.port,
        "bind": info.bind,
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the Art-Net UDP socket."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    _sequences.clear()
    return {"disconnected": True}


# ─── DMX TOOLS ────────────────────────────────────────────────────────

@mcp.tool()
def send_dmx(
    port_address: int,
    data: list[int],
    physical: int = 0,
    sequenced: bool = True,
) -> dict[str, Any]:
    """Send one frame of DMX512 channel levels to a universe.

    Args:
        port_address: 15-bit Port-Address (0-32767).
        data: Channel levels 0-255, 1 to 512 values starting at channel 1.
        physical: Physical input port reported to receivers.
        sequenced: Number packets 1-255 so nodes can reorder them.
    """
    conn = _get_connection()
    try:
        command = Output(
            sequence=_next_sequence(port_address) if sequenced else 0,
            physical=physical,
            port_address=port_address,
            data=data,
        )
        sent = conn.send(command)
    except (ArtNetError, ValueError) as e:
        logger.warning("send_dmx to %s failed: %s", port_address, e)
        return {"error": str(e)}

    if sequenced:
        _sequences[port_address] = command.sequence

    return {
        "sent": sent,
        "port_address": port_address,
        "channels": len(command.data),
        "sequence": command.sequence,
    }


@mcp.tool()
def blackout(port_address: int, channels: int = MAX_DMX_CHANNELS) -> dict[str, Any]:
    """Set every channel of a universe to zero.

    Args:
        port_address: 15-bit Port-Address (0-32767).
        channels: Number of channels to zero (1-512).
    """
    if not 1 <= channels <= MAX_DMX_CHANNELS:
        return {"error": f"Channels must be 1-{MAX_DMX_CHANNELS}"}
    return send_dmx(port_address, [0] * channels)


# ─── TIMECODE TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def send_timecode(
    hours: int,
    minutes: int,
    seconds: int,
    frames: int,
    key_type: int = KeyType.SMPTE,
    stream_id: int = 0,
) -> dict[str, Any]:
    """Broadcast a timecode position.

    Args:
        hours: 0-23.
        minutes: 0-59.
        seconds: 0-59.
        frames: 0-29 depending on key_type.
        key_type: 0 = Film (24), 1 = EBU (25), 2 = DF (29.97), 3 = SMPTE (30).
        stream_id: Timecode stream, 0 is the master.
    """
    conn = _get_connection()
    try:
        command = Timecode(
            stream_id=stream_id,
            frames=frames,
            seconds=seconds,
            minutes=minutes,
            hours=hours,
            key_type=key_type,
        )
        sent = conn.send(command)
    except (ArtNetError, ValueError) as e:
        return {"error": str(e)}

    return {"sent": sent, "timecode": str(command), "stream_id": stream_id}


# ─── RECEIVE / CODEC TOOLS ────────────────────────────────────────────

@mcp.tool()
def receive_packet(timeout_ms: int = READ_TIMEOUT_MS) -> dict[str, Any]:
    """Wait for the next supported Art-Net packet and decode it.

    Args:
        timeout_ms: How long to wait in milliseconds.
    """
    conn = _get_connection()
    command = conn.receive(timeout_ms)
    if command is None:
        return {"error": "No valid Art-Net packet received"}
    return _describe(command)


@mcp.tool()
def encode_dmx(port_address: int, data: list[int], sequence: int = 0) -> dict[str, Any]:
    """Encode an ArtDmx packet without sending it.

    Args:
        port_address: 15-bit Port-Address (0-32767).
        data: Channel levels 0-255, 1 to 512 values.
        sequence: Sequence number, 0 disables reordering.
    """
    try:
        packet = into_buffer(
            Output(sequence=sequence, port_address=port_address, data=data)
        )
    except (ArtNetError, ValueError) as e:
        return {"error": str(e)}
    return {"hex": packet.hex(" "), "size": len(packet)}


@mcp.tool()
def decode_packet(packet_hex: str) -> dict[str, Any]:
    """Decode a hex-encoded Art-Net packet.

    Args:
        packet_hex: Packet bytes as hex, spaces allowed.
    """
    try:
        packet = bytes.fromhex(packet_hex)
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}

    try:
        command = from_buffer(packet)
    except ArtNetError as e:
        return {"error": str(e)}
    return _describe(command)


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("artnet://protocol/opcodes")
def resource_opcodes() -> str:
    """OpCodes this server can encode and decode."""
    return json.dumps({
        "protocol_version": int.from_bytes(ARTNET_PROTOCOL_VERSION, "big"),
        "opcodes": {
            opcode.name: f"0x{opcode.value:04X}" for opcode in COMMANDS
        },
        "max_port_address": MAX_PORT_ADDRESS,
        "max_channels": MAX_DMX_CHANNELS,
    })


@mcp.resource("artnet://connection/status")
def resource_connection_status() -> str:
    """Current socket status."""
    if _connection is None or not _connection.connected:
        return json.dumps({"connected": False})
    info = _connection.info
    return json.dumps({
        "connected": True,
        "target": info.target,
        "port": info.port,
        "bind": info.bind,
        "broadcast": info.broadcast,
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def program_scene(description: str, port_address: int = 1) -> str:
    """Guide the AI to build a DMX scene from a description.

    Args:
        description: The look to create (e.g. "warm amber wash").
        port_address: Universe to send to.
    """
    net = PortAddress(port_address).net
    return f"""Create a lighting scene: {description}.
Target Port-Address {port_address} (Net {net}).
Consider:
- Which channels drive intensity and which drive colour
- Keeping unused channels at 0
- Sending at least one channel and no more than {MAX_DMX_CHANNELS}

Use the send_dmx tool to output the scene and blackout to clear it."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
