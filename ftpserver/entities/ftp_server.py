import importlib
import logging
import os
import socket
import threading

from ftpserver.entities import replies
from ftpserver.entities.client_session import ClientSession
from ftpserver.entities.command import Command
from ftpserver.entities.errors import ControlConnectionError, FTPError, ProtocolError
from ftpserver.entities.server_config import ServerConfig

logger = logging.getLogger(__name__)

ACCEPT_POLL_INTERVAL = 0.5


def _load_command_handlers():
    """Carga handlers desde el paquete `ftpserver.commands` (un modulo por comando)."""
    handlers = {}
    commands_path = os.path.join(os.path.dirname(__file__), '..', 'commands')

    for filename in sorted(os.listdir(commands_path)):
        if not filename.endswith('.py') or filename.startswith('_'):
            continue

        name = filename[:-3]
        module = importlib.import_module(f"ftpserver.commands.{name}")

        handler_func = getattr(module, f'handle_{name}', None) or getattr(module, 'handle', None)
        if handler_func:
            handlers[name.upper()] = handler_func
            logger.debug("Loaded command: %s", name.upper())
        else:
            logger.warning("No handler found for %s", name.upper())

    return handlers

_COMMAND_HANDLERS = _load_command_handlers()


def handle_unsupported(command, session):
    session.send_response(replies.OK, replies.MSG_NOT_SUPPORTED)


class FTPServer:
    """Escucha conexiones de control y crea una sesion por cliente.

    Por defecto atiende un cliente a la vez: no vuelve a aceptar hasta que la
    sesion actual termina. Con `config.concurrent` cada cliente va en su hilo.
    """

    def __init__(self, config: ServerConfig = None):
        self.config = config or ServerConfig()
        self._server_sock = None
        self._running = threading.Event()
        self._stopped = threading.Event()
        self._serving = False
        self._client_socks = set()

    @property
    def server_address(self):
        if self._server_sock is None:
            return None
        return self._server_sock.getsockname()

    def bind(self):
        server_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            server_sock.bind((self.config.host, self.config.port))
            server_sock.listen(self.config.backlog)
        except OSError:
            server_sock.close()
            raise
        server_sock.settimeout(ACCEPT_POLL_INTERVAL)
        self._server_sock = server_sock
        self._stopped.clear()
        self._running.set()
        logger.info("FTP connection listener started on %s:%d", *self.server_address)
        return self.server_address

    def serve_forever(self):
        if self._server_sock is None:
            if self._stopped.is_set():
                return
            self.bind()

        server_sock = self._server_sock
        self._serving = True
        try:
            while self._running.is_set():
                try:
                    client_sock, client_addr = server_sock.accept()
                except socket.timeout:
                    continue
                except OSError as e:
                    if not self._running.is_set():
                        break
                    logger.exception("Error accepting connection: %s", e)
                    continue

                logger.info("Accepted connection from %s", client_addr)
                if self.config.concurrent:
                    t = threading.Thread(target=self._handle_client, args=(client_sock, client_addr), daemon=True)
                    t.start()
                else:
                    self._handle_client(client_sock, client_addr)

        finally:
            self._serving = False
            self._close_listener()
            self._stopped.set()
            logger.info("Connection listener stopped")

    def shutdown(self, wait: bool = True, timeout: float = None):
        """Detiene el bucle de aceptacion. Con `wait` espera a que termine
        (no usar `wait` desde el mismo hilo que corre serve_forever)."""
        self._running.clear()
        self._drop_clients()
        if self._serving:
            if wait:
                self._stopped.wait(timeout)
        else:
            self._close_listener()
            self._stopped.set()

    def _handle_client(self, client_sock, client_addr):
        self._client_socks.add(client_sock)
        try:
            if not self._running.is_set():
                _shutdown_quietly(client_sock)
            client_handler(client_sock, client_addr, self.config)
        finally:
            self._client_socks.discard(client_sock)

    def _drop_clients(self):
        """Corta las conexiones de control abiertas; sus sesiones ven EOF y terminan."""
        for client_sock in list(self._client_socks):
            logger.info("Dropping control connection %s on shutdown", client_sock)
            _shutdown_quietly(client_sock)

    def _close_listener(self):
        if self._server_sock is not None:
            try:
                self._server_sock.close()
            except OSError:
                logger.exception("Error closing listener socket")
            self._server_sock = None


def _shutdown_quietly(sock: socket.socket):
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        logger.debug("Error shutting down socket: %s", e)


def client_handler(client_socket: socket.socket, client_address, config: ServerConfig):
    """Crear sesion y ejecutar dispatcher para el cliente."""
    logger.info("Handling new client %s", client_address)
    session = ClientSession(client_socket, client_address=client_address, config=config)

    try:
        session.send_response(replies.SERVICE_READY, replies.MSG_WELCOME)
        command_dispatcher(session)

    except ControlConnectionError as e:
        logger.info("Client %s was dropped: %s", client_address, e)

    except Exception:
        logger.exception("Error while handling client %s", client_address)

    finally:
        session.close()
        logger.info("Session closed for %s", client_address)


def command_dispatcher(session: ClientSession):
    """Leer la conexion de control linea a linea y despachar cada comando en orden."""
    for line in session.recv_lines():
        handle_line(session, line)

        if session.closing:
            logger.info("Closing control connection for %s after QUIT", session.client_address)
            return

    logger.info("Client %s closed the connection", session.client_address)


def handle_line(session: ClientSession, line: str):
    """Parsear una linea y ejecutar su handler aplicando la puerta de login.

    Tras un USER aceptado, la siguiente linea no vacia va al handler de PASS
    sea cual sea su operacion.
    """
    command = Command(line)
    if command.is_empty():
        return

    if command.name == "PASS" or session.is_awaiting_password():
        logger.info("Received command from %s: PASS ****", session.client_address)
    else:
        logger.info("Received command from %s: %s", session.client_address, command.text.strip())

    if session.is_awaiting_password():
        handler = _COMMAND_HANDLERS["PASS"]
    elif command.name != "USER" and not session.is_authenticated():
        session.send_response(replies.NOT_LOGGED_IN, replies.MSG_MUST_LOGIN)
        return
    else:
        handler = _COMMAND_HANDLERS.get(command.name, handle_unsupported)

    try:
        handler(command, session)

    except ProtocolError as e:
        logger.warning("Ignoring malformed %s from %s: %s", command.name, session.client_address, e)
        if session.config.reply_on_bad_port:
            session.send_response(replies.ACTION_FAILED, replies.MSG_ACTION_NOT_TAKEN)

    except FTPError as e:
        logger.info("%s failed for %s: %s", command.name, session.client_address, e)
        session.send_response(e.code, e.message)


__all__ = [
    'FTPServer',
    'client_handler',
    'command_dispatcher',
    'handle_line',
]
