import socket
from typing import Optional

class DataConnectionManager:
    def __init__(self, ip: str = None, port: int = None, timeout: float = 10.0):
        """
        Maneja la conexion de datos del cliente FTP.

        Modo pasivo: `connect()` hacia la IP/puerto de la respuesta 227.
        Modo activo: `listen()` en un puerto local y `accept()` cuando el
        servidor marca tras el PORT.
        """
        self.ip = ip
        self.port = port
        self.timeout = timeout
        self.data_socket: Optional[socket.socket] = None
        self.listener: Optional[socket.socket] = None

    def connect(self):
        """
        Establece la conexion TCP con el servidor en el canal de datos (PASV).
        """
        self.data_socket = socket.create_connection((self.ip, self.port), timeout=self.timeout)

    def listen(self, ip: str = "127.0.0.1"):
        """
        Abre un listener local para modo activo y retorna (ip, puerto).
        """
        self.listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.listener.bind((ip, 0))
        self.listener.listen(1)
        self.listener.settimeout(self.timeout)
        self.ip, self.port = self.listener.getsockname()
        return self.ip, self.port

    def accept(self):
        """
        Acepta la conexion que abrio el servidor (PORT).
        """
        self.data_socket, _ = self.listener.accept()
        self.data_socket.settimeout(self.timeout)

    def close(self):
        """
        Cierra la conexion de datos y el listener si existe.
        """
        if self.data_socket:
            self.data_socket.close()
            self.data_socket = None
        if self.listener:
            self.listener.close()
            self.listener = None

    def receive_bytes(self) -> bytes:
        """
        Lee el canal de datos hasta que el servidor lo cierra.
        """
        buffer = []
        while True:
            data = self.data_socket.recv(4096)
            if not data:
                break
            buffer.append(data)
        return b''.join(buffer)

    def receive_list(self) -> str:
        """
        Lee un listado completo y lo retorna como texto.
        """
        return self.receive_bytes().decode('utf-8', errors='replace')

    def receive_file(self, local_path: str) -> int:
        """
        Guarda en `local_path` todo lo recibido; retorna los bytes escritos.
        """
        total = 0
        with open(local_path, 'wb') as f:
            while True:
                data = self.data_socket.recv(4096)
                if not data:
                    break
                f.write(data)
                total += len(data)
        return total

