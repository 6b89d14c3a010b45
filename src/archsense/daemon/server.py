"""Unix socket server: one request, one response, one thread per connection."""

import logging
import os
import socketserver
import threading
from pathlib import Path

from . import protocol
from .handlers import CommandDispatcher

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_PATH = Path("/tmp/arch-sense.sock")
SOCKET_MODE = 0o777


class _ConnectionHandler(socketserver.BaseRequestHandler):
    """Serve exactly one request on an accepted connection."""

    server: "_ThreadingUnixServer"

    def handle(self) -> None:
        payload = self.request.recv(self.server.buffer_size)
        if not payload:
            # Peer closed without sending anything
            return

        try:
            response = self.server.dispatcher.handle_payload(payload)
        except Exception:
            logger.exception("Unhandled error while serving a request")
            response = protocol.Error(message="Internal daemon error")

        self.request.sendall(protocol.encode_response(response))


class _ThreadingUnixServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True

    def __init__(
        self, path: str, dispatcher: CommandDispatcher, buffer_size: int
    ) -> None:
        self.dispatcher = dispatcher
        self.buffer_size = buffer_size
        super().__init__(path, _ConnectionHandler)

    def handle_error(self, request, client_address) -> None:
        logger.exception("Connection handler failed")


class CommandServer:
    """Accept client connections and answer each with one response."""

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        socket_path: Path = DEFAULT_SOCKET_PATH,
        buffer_size: int = protocol.BUFFER_SIZE,
    ) -> None:
        self.dispatcher = dispatcher
        self.socket_path = Path(socket_path)
        self.buffer_size = buffer_size
        self._server: _ThreadingUnixServer | None = None
        self._thread: threading.Thread | None = None

    def bind(self) -> "_ThreadingUnixServer":
        """Bind the listening socket and open it to every local user.

        Returns:
            The bound server

        Raises:
            OSError: If the socket cannot be bound; the daemon cannot
                run without it

        """
        if self.socket_path.exists() or self.socket_path.is_symlink():
            logger.info("Removing stale socket %s", self.socket_path)
            self.socket_path.unlink()

        server = _ThreadingUnixServer(
            str(self.socket_path), self.dispatcher, self.buffer_size
        )
        os.chmod(self.socket_path, SOCKET_MODE)
        logger.info("Listening for commands on %s", self.socket_path)
        self._server = server
        return server

    def start(self) -> None:
        """Bind and serve in a background thread."""
        if self._thread and self._thread.is_alive():
            raise RuntimeError("Command server already started")
        server = self._server if self._server is not None else self.bind()
        self._thread = threading.Thread(
            target=server.serve_forever,
            name="CommandServer",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop accepting connections and remove the socket file."""
        if self._server is None:
            return
        logger.info("Stopping command server")
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join(timeout=5.0)
            self._thread = None
        self._server.server_close()
        self._server = None
        try:
            self.socket_path.unlink()
        except FileNotFoundError:
            pass

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
