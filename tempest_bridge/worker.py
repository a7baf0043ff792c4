import argparse
import logging
import socket
import sys
from typing import List, Optional

from prometheus_client import Counter, Histogram, start_http_server
from pydantic import ValidationError

from .base_settings import BaseConfig, parse_address
from .decoder import decode
from .models import UnknownMessage, parse_message
from .producer import GraphiteProducer
from .units import UnitSystem

logger = logging.getLogger(__name__)
# every line sent, enabled by --verbose whatever the log level
echo_logger = logging.getLogger(f"{__name__}.echo")

# Tempest packets are well under this; longer datagrams are truncated and fail to parse
MAX_DATAGRAM_SIZE = 2000

# Prometheus metrics
packets_received_total = Counter('tempest_packets_received_total', 'Total number of Tempest datagrams received')
parse_errors_total = Counter('tempest_parse_errors_total', 'Total number of datagrams that failed to parse')
decode_errors_total = Counter('tempest_decode_errors_total', 'Total number of parsed messages that failed to decode')
messages_decoded_total = Counter('tempest_messages_decoded_total', 'Total number of messages translated', ['type'])
unhandled_messages_total = Counter('tempest_unhandled_messages_total', 'Total number of messages with an unhandled type')
lines_sent_total = Counter('tempest_graphite_lines_sent_total', 'Total number of graphite lines sent')
send_errors_total = Counter('tempest_graphite_send_errors_total', 'Total number of graphite socket write errors')
receive_errors_total = Counter('tempest_receive_errors_total', 'Total number of UDP receive errors')
processing_duration = Histogram('tempest_packet_processing_seconds', 'Time spent translating one datagram')


class BridgeWorker:
    def __init__(self, settings: BaseConfig, producer: Optional[GraphiteProducer] = None):
        self.settings = settings
        self.producer = producer or GraphiteProducer(settings.graphite_addr)
        self.sock: Optional[socket.socket] = None
        self.running = False

    def bind(self) -> socket.socket:
        """Bind the listen socket; failures raise and are fatal at startup."""
        host, port = parse_address(self.settings.listen_addr, default_host="0.0.0.0")
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_DGRAM, flags=socket.AI_PASSIVE
        )[0]
        sock = socket.socket(family, socktype, proto)
        try:
            sock.bind(sockaddr)
        except OSError:
            sock.close()
            raise
        # wake up periodically so stop() is noticed without traffic
        sock.settimeout(0.5)
        self.sock = sock
        logger.info(f"Listening for Tempest broadcasts on {host or '*'}:{sock.getsockname()[1]}")
        return sock

    def start(self):
        """Receive, translate and forward datagrams until stopped"""
        if self.sock is None:
            self.bind()
        logger.info("Starting Tempest bridge worker...")
        self.running = True

        try:
            while self.running:
                try:
                    data, _ = self.sock.recvfrom(MAX_DATAGRAM_SIZE)
                except socket.timeout:
                    continue
                except OSError as e:
                    if not self.running:
                        break
                    logger.error(f"error on udp read: {e}")
                    receive_errors_total.inc()
                    continue

                self.handle_packet(data)

        except KeyboardInterrupt:
            logger.info("Shutting down Tempest bridge worker...")
        finally:
            self.close()

    def stop(self):
        self.running = False

    def close(self):
        self.running = False
        if self.sock:
            self.sock.close()
            self.sock = None
        self.producer.close()

    def handle_packet(self, data: bytes) -> int:
        """Translate one datagram and send its lines; returns the number of lines sent.

        A bad packet is logged and dropped, it never stops the worker.
        """
        packets_received_total.inc()
        with processing_duration.time():
            try:
                message = parse_message(data)
            except ValidationError as e:
                parse_errors_total.inc()
                logger.error(f"Failed to parse Tempest packet: {e}")
                logger.error(f"> {data.decode('utf-8', errors='replace')}")
                return 0

            try:
                lines = list(decode(message, self.settings.units, self.settings.graphite_prefix))
            except Exception as e:
                decode_errors_total.inc()
                logger.error(f"Error decoding {message.type} message: {e}")
                return 0

            if isinstance(message, UnknownMessage):
                unhandled_messages_total.inc()
            else:
                messages_decoded_total.labels(type=message.type).inc()

            sent = 0
            for line in lines:
                try:
                    self.producer.send(line)
                except OSError as e:
                    send_errors_total.inc()
                    logger.error(f"error on socket write: {e}")
                    continue
                sent += 1
                lines_sent_total.inc()
                if self.settings.verbose:
                    echo_logger.info(f"{self.producer.address} <- {line}")
            return sent


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tempest-bridge",
        description="Forward Tempest weather station UDP broadcasts to graphite",
    )
    p.add_argument("-l", "--listen", dest="listen_addr", help="UDP socket to listen to (default :50222)")
    p.add_argument("-g", "--graphite", dest="graphite_addr",
                   help="destination for graphite line-protocol UDP packets (default graphite:2003)")
    p.add_argument("-u", "--imperial", dest="units", action="store_const", const=UnitSystem.IMPERIAL,
                   help="use imperial units")
    p.add_argument("-v", "--verbose", action="store_const", const=True,
                   help="also log every line sent, even when --log-level is above INFO")
    p.add_argument("--prefix", dest="graphite_prefix", help="metric namespace (default wx.tempest)")
    p.add_argument("--metrics-port", type=int, help="serve Prometheus metrics on this port (0 disables)")
    p.add_argument("--log-level", help="logging level (default INFO)")
    return p


def load_settings(argv: Optional[List[str]] = None) -> BaseConfig:
    """Build settings from the environment, with command line flags taking precedence."""
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return BaseConfig(**overrides)


def configure_logging(settings: BaseConfig):
    logging.getLogger().setLevel(settings.log_level)
    if settings.verbose:
        echo_logger.setLevel(logging.INFO)


def main(argv: Optional[List[str]] = None):
    """Main function to run the Tempest bridge"""
    logging.basicConfig(level=logging.INFO)

    try:
        settings = load_settings(argv)
        configure_logging(settings)
        worker = BridgeWorker(settings)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to start Tempest bridge: {e}")
        sys.exit(1)

    try:
        worker.bind()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to start Tempest bridge: {e}")
        worker.producer.close()
        sys.exit(1)

    if settings.metrics_port:
        start_http_server(settings.metrics_port)
        logger.info(f"Prometheus metrics server started on port {settings.metrics_port}")

    logger.info(f"sending graphite output to {settings.graphite_addr}")
    worker.start()


if __name__ == "__main__":
    main()
