import logging
import re
import socket
from typing import Optional

from ftpserver.entities.errors import ProtocolError, TransferError

logger = logging.getLogger(__name__)

PORT_ARGUMENT_RE = re.compile(r"(\d{1,3},){5}\d{1,3}")


class DataConnection:
    """Canal de datos de una sesion. Se usa para una sola transferencia."""

    def __init__(self):
        self._conn: Optional[socket.socket] = None
        self.bytes_sent = 0

    def send(self, data: bytes) -> None:
        if self._conn is None:
            raise TransferError(detail="Data connection is not established")
        try:
            self._conn.sendall(data)
        except OSError as e:
            raise TransferError(detail=f"Data connection write failed: {e}") from e
        self.bytes_sent += len(data)
        logger.debug("Sent %d bytes on data connection", len(data))

    def is_connected(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        if self._conn is not None:
            _close_quietly(self._conn)
            self._conn = None
            logger.info("Data connection closed (%d bytes sent)", self.bytes_sent)


class ActiveDataConnection(DataConnection):
    """El servidor marca hacia la direccion que el cliente envio con PORT."""

    def __init__(self, ip: str, port: int):
        super().__init__()
        self.ip = ip
        self.port = port

    def connect(self, timeout: float = None) -> "ActiveDataConnection":
        try:
            self._conn = socket.create_connection((self.ip, self.port), timeout=timeout)
        except OSError as e:
            raise TransferError(detail=f"Can't connect to {self.ip}:{self.port}: {e}") from e
        logger.info("Active data connection established with %s:%d", self.ip, self.port)
        return self


class PassiveDataConnection(DataConnection):
    """El servidor escucha en un puerto efimero y el cliente se conecta."""

    def __init__(self, bind_host: str = "0.0.0.0", advertised_ip: str = "127.0.0.1"):
        super().__init__()
        self.advertised_ip = advertised_ip
        self.listener = create_data_socket(bind_host)
        self.port = self.listener.getsockname()[1]
        logger.info("PASV listening on %s:%d (advertised %s)", bind_host, self.port, advertised_ip)

    def encode_address(self) -> str:
        return encode_host_port(self.advertised_ip, self.port)

    def accept(self, timeout: float = None) -> bool:
        """Espera una unica conexion entrante.

        Retorna False si vence `timeout` o falla el accept; en ese caso el
        listener queda cerrado. `timeout=None` bloquea indefinidamente.
        """
        if self.listener is None:
            return False
        self.listener.settimeout(timeout)
        try:
            conn, addr = self.listener.accept()
        except socket.timeout:
            logger.warning("PASV accept timed out after %ss on port %d", timeout, self.port)
            self.close()
            return False
        except OSError as e:
            logger.warning("PASV accept failed on port %d: %s", self.port, e)
            self.close()
            return False

        conn.settimeout(timeout)
        self._conn = conn
        logger.info("Passive data connection established with %s", addr)
        return True

    def close(self) -> None:
        super().close()
        if self.listener is not None:
            _close_quietly(self.listener)
            self.listener = None
            logger.debug("PASV listener on port %d closed", self.port)


def create_data_socket(bind_host: str = "0.0.0.0") -> socket.socket:
    """Crea un socket TCP escuchando en un puerto asignado por el SO (backlog 1)."""
    data_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        data_socket.bind((bind_host, 0))
        data_socket.listen(1)
    except OSError as e:
        data_socket.close()
        raise TransferError(detail=f"Can't open passive listener on {bind_host}: {e}") from e
    return data_socket


def encode_host_port(ip: str, port: int) -> str:
    """'10.0.0.5', 4488 -> '10,0,0,5,17,136'"""
    return ",".join(ip.split(".") + [str(port // 256), str(port % 256)])


def parse_port_argument(text: str) -> tuple[str, int]:
    """Extrae (ip, puerto) del sexteto h1,h2,h3,h4,p1,p2 contenido en `text`."""
    match = PORT_ARGUMENT_RE.search(text)
    if not match:
        raise ProtocolError(detail=f"No host-port sextet in {text.strip()!r}")

    octets = [int(part) for part in match.group(0).split(",")]
    if any(octet > 255 for octet in octets):
        raise ProtocolError(detail=f"Octet out of range in {match.group(0)!r}")

    ip = ".".join(str(octet) for octet in octets[:4])
    port = octets[4] * 256 + octets[5]
    return ip, port


def get_pasv_ip(control_socket: socket.socket = None, configured: str = None) -> str:
    """
    Determina que IP anunciar al cliente en la respuesta 227.
    - Si hay una direccion configurada, se usa esa.
    - Si no, la IP local de la conexion de control (por donde nos alcanzo el cliente).
    - Como ultimo recurso, la IP resuelta del hostname.

    Raises:
        TransferError: si no hay ninguna direccion que anunciar
    """
    if configured:
        return configured

    if control_socket is not None:
        try:
            sockname = control_socket.getsockname()
        except OSError:
            sockname = None
        local_ip = sockname[0] if isinstance(sockname, tuple) else None
        if local_ip and local_ip != "0.0.0.0" and ":" not in local_ip:
            return local_ip

    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError as e:
        raise TransferError(detail=f"Can't determine an address to advertise for PASV: {e}") from e


def _close_quietly(sock: socket.socket) -> None:
    try:
        sock.close()
    except OSError as e:
        logger.debug("Error closing socket: %s", e)
