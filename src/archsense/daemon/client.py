"""Client side of the protocol: one command per connection."""

import socket
from pathlib import Path

from . import protocol
from .server import DEFAULT_SOCKET_PATH


def send_command(
    command: protocol.Command,
    socket_path: Path = DEFAULT_SOCKET_PATH,
    timeout: float = 5.0,
    buffer_size: int = protocol.BUFFER_SIZE,
) -> protocol.Response:
    """Send a command and return the daemon's response.

    Raises:
        OSError: If the daemon is not reachable
        ProtocolError: If the reply is not a valid response

    """
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.settimeout(timeout)
        sock.connect(str(socket_path))
        sock.sendall(protocol.encode_command(command))
        payload = sock.recv(buffer_size)
    return protocol.decode_response(payload)
