"""
Pluggable transports used by the connection manager
"""

from .transport import Transport, TcpTransport, TransportError

__all__ = ["Transport", "TcpTransport", "TransportError"]
