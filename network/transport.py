"""
Transport interface and a TCP reachability transport
"""

import logging
import socket
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a transport cannot open or close its connection"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class Transport(ABC):
    """Abstract base class for connection transports"""

    @abstractmethod
    def open(self, host: str, port: int, timeout: float) -> None:
        """
        Open a connection to host:port

        Raises:
            TransportError: If the connection cannot be established
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection; calling it when closed does nothing"""
        pass

    @property
    def is_open(self) -> bool:
        return False


class TcpTransport(Transport):
    """Plain TCP connection; no application protocol is spoken over it"""

    def __init__(self, keep_alive: bool = True):
        self.keep_alive = keep_alive
        self.sock: Optional[socket.socket] = None

    def open(self, host: str, port: int, timeout: float) -> None:
        if self.sock is not None:
            return
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise TransportError(f"Could not connect to {host}:{port}: {e}", {
                "host": host, "port": port, "error_type": type(e).__name__
            }) from e

        if self.keep_alive:
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
            except OSError as e:
                sock.close()
                raise TransportError(f"Could not enable keep-alive on {host}:{port}: {e}", {
                    "host": host, "port": port, "error_type": type(e).__name__
                }) from e
        self.sock = sock
        logger.debug(f"TCP connection open to {host}:{port}")

    def close(self) -> None:
        if self.sock is None:
            return
        sock, self.sock = self.sock, None
        try:
            sock.close()
        except OSError as e:
            raise TransportError(f"Error closing socket: {e}") from e

    @property
    def is_open(self) -> bool:
        return self.sock is not None
