import enum
import logging
import socket
from typing import Optional

from ftpserver.entities import replies
from ftpserver.entities.data_connection import DataConnection
from ftpserver.entities.errors import ControlConnectionError
from ftpserver.entities.server_config import TYPE_ASCII, TYPE_BINARY, ServerConfig

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"
MAX_LINE_LENGTH = 8192

TYPE_NAMES = {
    TYPE_ASCII: "ASCII",
    TYPE_BINARY: "Binary",
}


class LoginState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AWAITING_PASSWORD = "awaiting_password"
    AUTHENTICATED = "authenticated"


class ClientSession:
    """
    Estado de una sesion FTP asociada a una unica conexion de control.

    Nada de este estado se comparte entre sesiones: cada conexion aceptada
    recibe su propio directorio de trabajo, tipo de transferencia y canal de datos.
    """

    def __init__(self, control_socket: "socket.socket", client_address=None, config: ServerConfig = None):
        self.config = config or ServerConfig()
        self.client_address = client_address
        self._control_socket = control_socket

        # Estado de autenticacion / paths
        self.login_state = LoginState.UNAUTHENTICATED
        self.username = None
        self.current_directory = self.config.root_directory

        # Tipo de transferencia y canal de datos
        self.transfer_type = self.config.default_type
        self.data_connection: Optional[DataConnection] = None

        self.closing = False

    # ----------------- user / auth -----------------
    def accept_username(self, username: str):
        """USER aceptado: el siguiente comando se trata como la contrasena."""
        self.username = username
        self.login_state = LoginState.AWAITING_PASSWORD
        logger.info("Username set to: %s", username)

    def authenticate(self):
        if self.login_state is not LoginState.AWAITING_PASSWORD:
            raise RuntimeError("Cannot authenticate without username")
        self.login_state = LoginState.AUTHENTICATED
        logger.info("User %s authenticated successfully", self.username)

    def is_authenticated(self) -> bool:
        return self.login_state is LoginState.AUTHENTICATED

    def is_awaiting_password(self) -> bool:
        return self.login_state is LoginState.AWAITING_PASSWORD

    # ----------------- transfer type -----------------
    def set_transfer_type(self, type_code: str):
        self.transfer_type = TYPE_ASCII if type_code.upper() == TYPE_ASCII else TYPE_BINARY

    def is_ascii(self) -> bool:
        return self.transfer_type == TYPE_ASCII

    def get_transfer_type_name(self) -> str:
        return TYPE_NAMES[self.transfer_type]

    # ----------------- data connection -----------------
    def set_data_connection(self, data_connection: DataConnection):
        """Registra un canal de datos nuevo, cerrando el anterior si existia."""
        self.close_data_connection()
        self.data_connection = data_connection

    def take_data_connection(self) -> Optional[DataConnection]:
        """Retira el canal de datos de la sesion para una transferencia."""
        data_connection, self.data_connection = self.data_connection, None
        return data_connection

    def close_data_connection(self):
        if self.data_connection is not None:
            self.data_connection.close()
            self.data_connection = None
            logger.debug("Data connection state cleaned up for %s", self.client_address)

    # ----------------- control channel -----------------
    @property
    def control_socket(self) -> "socket.socket":
        return self._control_socket

    def send_response(self, code: int, message: str) -> None:
        """Envia una respuesta "CODE message\\r\\n" por la conexion de control.

        Raises:
            ControlConnectionError: si la escritura falla
        """
        line = replies.format_reply(code, message)
        try:
            self._control_socket.sendall(line.encode("utf-8"))
        except OSError as e:
            raise ControlConnectionError(f"Failed to send response to {self.client_address}: {e}") from e
        logger.info("Sent response to %s: %s", self.client_address, line.strip())

    def recv_lines(self, chunk_size: int = 4096):
        """
        Generador de lineas recibidas por la conexion de control.

        Acepta CRLF o LF como terminador. Termina cuando el cliente cierra.

        Raises:
            ControlConnectionError: si la lectura falla, vence control_timeout
                o una linea supera MAX_LINE_LENGTH bytes sin terminador
        """
        self._control_socket.settimeout(self.config.control_timeout)
        buffer = b""

        while True:
            try:
                chunk = self._control_socket.recv(chunk_size)
            except socket.timeout as e:
                raise ControlConnectionError(f"Control connection idle for {self.config.control_timeout}s") from e
            except OSError as e:
                raise ControlConnectionError(f"Control connection read failed: {e}") from e

            if not chunk:
                break

            buffer += chunk
            while b"\n" in buffer:
                line, buffer = buffer.split(b"\n", 1)
                yield line.rstrip(b"\r").decode("utf-8", errors="replace")

            if len(buffer) > MAX_LINE_LENGTH:
                raise ControlConnectionError(f"Command line longer than {MAX_LINE_LENGTH} bytes")

        # En caso de que quede algo en el buffer
        if buffer.strip():
            yield buffer.rstrip(b"\r").decode("utf-8", errors="replace")

    def close(self):
        """Libera el canal de datos y la conexion de control."""
        self.close_data_connection()
        try:
            self._control_socket.close()
        except OSError:
            logger.exception("Error closing control socket for %s", self.client_address)

    # ----------------- util -----------------
    def __str__(self):
        return (f"ClientSession(addr={self.client_address}, user={self.username}, "
                f"state={self.login_state.value}, cwd={self.current_directory}, "
                f"type={self.get_transfer_type_name()})")
