import socket
import threading

import pytest

from ftpclient import ClientCommandHandler, ControlConnectionManager, Parser
from ftpserver.entities.client_session import ClientSession
from ftpserver.entities.ftp_server import FTPServer
from ftpserver.entities.server_config import ServerConfig

HELLO_TEXT = b"first line\r\nsecond line\n"
BLOB = bytes(range(256)) * 2000


@pytest.fixture
def ftp_root(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    (root / "docs").mkdir()
    (root / "docs" / "readme.txt").write_bytes(b"inside docs\n")
    (root / "hello.txt").write_bytes(HELLO_TEXT)
    (root / "blob.bin").write_bytes(BLOB)
    return root


@pytest.fixture
def make_config(ftp_root):
    def _make(**overrides):
        options = {"host": "127.0.0.1", "port": 0, "root_directory": str(ftp_root)}
        options.update(overrides)
        return ServerConfig(**options)
    return _make


class ControlPeer:
    """Extremo del cliente de un socketpair conectado a una ClientSession."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.sock.settimeout(5)
        self._reader = sock.makefile("rb")

    def send(self, line: str):
        self.sock.sendall(line.encode("utf-8"))

    def reply(self) -> str:
        return self._reader.readline().decode("utf-8")

    def close(self):
        self._reader.close()
        self.sock.close()


@pytest.fixture
def session_factory(make_config):
    created = []

    def _make(**overrides):
        server_sock, client_sock = socket.socketpair()
        overrides.setdefault("pasv_address", "127.0.0.1")
        session = ClientSession(server_sock, client_address=("peer", 0), config=make_config(**overrides))
        peer = ControlPeer(client_sock)
        created.append((session, peer))
        return session, peer

    yield _make

    for session, peer in created:
        session.close()
        peer.close()


@pytest.fixture
def session_pair(session_factory):
    return session_factory()


@pytest.fixture
def server_factory(make_config):
    servers = []

    def _start(**overrides):
        server = FTPServer(make_config(**overrides))
        server.bind()
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.shutdown(timeout=5)


@pytest.fixture
def ftp_server(server_factory):
    return server_factory()


@pytest.fixture
def connect_client(ftp_server):
    handlers = []

    def _connect(server=None, passive=True):
        host, port = (server or ftp_server).server_address
        conn = ControlConnectionManager(host, port, timeout=5)
        conn.connect()
        handler = ClientCommandHandler(conn, Parser(), passive=passive)
        handlers.append(handler)
        return handler

    yield _connect

    for handler in handlers:
        handler.conn.disconnect()


@pytest.fixture
def client(connect_client):
    handler = connect_client()
    welcome = handler._welcome()
    assert welcome.code == "220"
    return handler


@pytest.fixture
def logged_in_client(client):
    assert client._login().code == "230"
    return client
