"""UDP connection for sending and receiving Art-Net datagrams.

Art-Net runs over UDP port 6454. Each datagram carries exactly one packet,
so a read hands one complete packet to the codec.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass

from ..protocol.command import ArtCommand, from_buffer, into_buffer
from ..protocol.errors import ArtNetError

logger = logging.getLogger(__name__)

ART_NET_PORT = 6454
DEFAULT_TARGET = "255.255.255.255"
DEFAULT_BIND = "0.0.0.0"
READ_TIMEOUT_MS = 1000
MAX_DATAGRAM_SIZE = 1024  # largest ArtDmx is 18 + 512 bytes


@dataclass
class ConnectionInfo:
    """Where the connection sends to and listens on."""

    target: str = DEFAULT_TARGET
    port: int = ART_NET_PORT
    bind: str = DEFAULT_BIND
    broadcast: bool = True


class UDPConnection:
    """Manages the UDP socket used to talk to Art-Net nodes.

    Usage::

        conn = UDPConnection("10.0.0.20")
        conn.open()
        conn.send(Output(port_address=1, data=[255, 0, 128]))
        command = conn.receive()
        conn.close()
    """

    def __init__(
        self,
        target: str = DEFAULT_TARGET,
        port: int = ART_NET_PORT,
        bind: str = DEFAULT_BIND,
        broadcast: bool = True,
    ) -> None:
        self._info = ConnectionInfo(
            target=target, port=port, bind=bind, broadcast=broadcast
        )
        self._socket: socket.socket | None = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def info(self) -> ConnectionInfo:
        return self._info

    def open(self) -> ConnectionInfo:
        """Bind the UDP socket.

        Returns:
            ConnectionInfo describing the target and local binding.

        Raises:
            ConnectionError: If the socket cannot be created or bound.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if self._info.broadcast:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind((self._info.bind, self._info.port))
        except OSError as e:
            sock.close()
            raise ConnectionError(
                f"Could not bind Art-Net socket on "
                f"{self._info.bind}:{self._info.port}: {e}"
            ) from e

        self._socket = sock
        self._connected = True
        logger.info(
            "Art-Net socket bound on %s:%d, target %s",
            self._info.bind,
            self._info.port,
            self._info.target,
        )
        return self._info

    def close(self) -> None:
        """Close the UDP socket."""
        if not self._connected:
            return

        try:
            self._socket.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._socket = None
            self._connected = False
            logger.info("Disconnected")

    def write(self, data: bytes, address: tuple[str, int] | None = None) -> int:
        """Send a raw datagram.

        Args:
            data: Complete Art-Net packet.
            address: ``(host, port)``; defaults to the configured target.

        Returns:
            Number of bytes sent.

        Raises:
            ConnectionError: If not connected.
        """
        if not self._connected:
            raise ConnectionError("Art-Net socket is not open")

        if address is None:
            address = (self._info.target, self._info.port)
        logger.debug("Sending %d bytes to %s:%d", len(data), *address)
        return self._socket.sendto(data, address)

    def send(self, command: ArtCommand, address: tuple[str, int] | None = None) -> int:
        """Serialize a command and send it.

        Raises:
            ArtNetError: If the command cannot be serialized; nothing is sent.
        """
        return self.write(into_buffer(command), address)

    def read(
        self, timeout_ms: int = READ_TIMEOUT_MS
    ) -> tuple[bytes, tuple[str, int]] | None:
        """Read one datagram.

        Returns:
            ``(data, sender)``, or None if the read timed out.

        Raises:
            ConnectionError: If not connected.
        """
        if not self._connected:
            raise ConnectionError("Art-Net socket is not open")

        self._socket.settimeout(timeout_ms / 1000)
        try:
            data, sender = self._socket.recvfrom(MAX_DATAGRAM_SIZE)
        except socket.timeout:
            return None
        return data, sender

    def receive(self, timeout_ms: int = READ_TIMEOUT_MS) -> ArtCommand | None:
        """Read one datagram and parse it.

        Returns:
            The parsed command, or None on timeout or if the datagram was
            not a valid, supported Art-Net packet.
        """
        result = self.read(timeout_ms)
        if result is None:
            return None
        data, sender = result
        try:
            return from_buffer(data)
        except ArtNetError as e:
            logger.debug("Dropping datagram from %s:%d: %s", *sender, e)
            return None
