import socket
import logging

logger = logging.getLogger(__name__)

class ControlConnectionManager:
    def __init__(self, host: str, port: int, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.socket: socket.socket = None
        self._reader = None
        self.timeout = timeout

    def connect(self):
        if self.socket is not None:
            raise RuntimeError("Connection already established.")
        try:
            logger.info(f"Connecting to {self.host}:{self.port} (timeout={self.timeout}s)")
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
            self._reader = self.socket.makefile('rb')
            logger.info(f"Connected to {self.host}:{self.port}")
        except OSError as e:
            logger.error(f"Failed to connect to {self.host}:{self.port} - {e}")
            self.socket = None
            raise ConnectionError(f"Failed to connect to {self.host}:{self.port} - {e}") from e

    def disconnect(self):
        if self.socket:
            try:
                logger.info(f"Closing connection to {self.host}:{self.port}")
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self._reader.close()
            self.socket.close()
            logger.info(f"Disconnected from {self.host}:{self.port}")
        self.socket = None
        self._reader = None

    @property
    def local_address(self) -> str:
        """IP local de la conexion de control (la que se anuncia en PORT)."""
        return self.socket.getsockname()[0]

    def send_command(self, command: str):
        if self.socket is None:
            raise RuntimeError("No connection established.")
        if not command.endswith('\r\n'):
            command += '\r\n'
        logger.debug(f"SEND: {command.strip()}")
        self.socket.sendall(command.encode('utf-8'))

    def receive_response(self) -> str:
        """Lee exactamente una linea de respuesta del servidor (sin CRLF).

        Retorna '' si el servidor cerro la conexion.
        """
        if self.socket is None:
            raise RuntimeError("No connection established.")
        line = self._reader.readline()
        response = line.decode('utf-8', errors='replace').rstrip('\r\n')
        logger.debug(f"RECV: {response}")
        return response
