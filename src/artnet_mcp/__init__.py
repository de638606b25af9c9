"""Art-Net codec for DMX512 and timecode, with a UDP transport and MCP server."""

__version__ = "0.1.0"
