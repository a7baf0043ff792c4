import socket
from typing import Union

from .base_settings import parse_address
from .decoder import MetricLine


class GraphiteProducer:
    """Writes metric lines to a graphite plaintext listener over UDP, one datagram per line."""

    def __init__(self, address: str):
        self.address = address
        host, port = parse_address(address, default_host="localhost")
        # resolution failures surface here as OSError (socket.gaierror)
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_DGRAM
        )[0]
        self.sock = socket.socket(family, socktype, proto)
        try:
            self.sock.connect(sockaddr)
        except OSError:
            self.sock.close()
            raise

    def send(self, line: Union[MetricLine, str]) -> int:
        return self.sock.send(str(line).encode("ascii"))

    def close(self):
        self.sock.close()
