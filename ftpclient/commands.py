from ftpclient.connection import ControlConnectionManager
from ftpclient.data_connection import DataConnectionManager
from ftpclient.parser import Parser, MessageStructure
from datetime import datetime, timezone

class ClientCommandHandler:
    def __init__(self, connection: ControlConnectionManager, parser: Parser, passive: bool = True):
        self.conn = connection
        self.parser = parser
        self.passive = passive
        self.data_addr = None
        self.data_conn: DataConnectionManager = None
        # history as list of dicts: {"time":..., "command":..., "response":..., "error":bool}
        self.history = []

    def _record(self, command: str, response: str, **extra) -> MessageStructure:
        parsed = self.parser.parse_data(response)
        entry = {
            "time": datetime.now(timezone.utc),
            "command": command,
            "raw": response,
            "parsed": parsed,
            "error": parsed.type in ("error", "unknown")
        }
        entry.update(extra)
        self.history.append(entry)
        return parsed

    # Comandos estandar, que no requieren conexion de datos
    def _execute(self, command: str) -> MessageStructure:
        self.conn.send_command(command)
        return self._record(command, self.conn.receive_response())

    def _welcome(self) -> MessageStructure:
        return self._record("", self.conn.receive_response())

    def _user(self, username: str):
        return self._execute(f"USER {username}")

    def _pass(self, password: str):
        return self._execute(f"PASS {password}")

    def _login(self, username: str = "anonymous", password: str = "guest@"):
        parsed = self._user(username)
        if parsed.code != "331":
            return parsed
        return self._pass(password)

    def _cwd(self, path: str = ""):
        return self._execute(f"CWD {path}".strip())

    def _type(self, mode: str = "A"):
        return self._execute(f"TYPE {mode}")

    def _quit(self):
        return self._execute("QUIT")

    # Negociacion del canal de datos
    def _pasv(self):
        parse_result = self._execute("PASV")
        if not parse_result.code.startswith('2'):
            return parse_result
        ip, port = self.parser.parse_pasv_response(parse_result.message)
        self.data_addr = (ip, port)
        self.data_conn = DataConnectionManager(ip, port, timeout=self.conn.timeout)
        # El servidor queda bloqueado en accept hasta que nos conectamos
        self.data_conn.connect()
        return parse_result

    def _port(self):
        data_conn = DataConnectionManager(timeout=self.conn.timeout)
        ip, port = data_conn.listen(self.conn.local_address)
        parse_result = self._execute(f"PORT {self.parser.build_port_argument(ip, port)}")
        if not parse_result.code.startswith('2'):
            data_conn.close()
            return parse_result
        self.data_addr = (ip, port)
        self.data_conn = data_conn
        return parse_result

    def _open_data_connection(self) -> MessageStructure:
        return self._pasv() if self.passive else self._port()

    def _transfer(self, command: str, receive=DataConnectionManager.receive_bytes):
        """Envia un comando de transferencia y retorna (lo que devuelva `receive`, respuesta final)."""
        negotiation = self._open_data_connection()
        if not negotiation.code.startswith('2'):
            return None, negotiation

        data_conn, self.data_conn = self.data_conn, None
        try:
            self.conn.send_command(command)
            preliminary = self._record(command, self.conn.receive_response())
            if preliminary.type != "preliminary":
                return None, preliminary
            if not self.passive:
                data_conn.accept()
            payload = receive(data_conn)
        finally:
            data_conn.close()

        final = self._record(command, self.conn.receive_response())
        return payload, final

    # Comandos que requieren conexion de datos
    def _list(self):
        return self._transfer("LIST", DataConnectionManager.receive_list)

    def _retr(self, remote_filename: str, local_path: str = None):
        """
        Descarga un archivo desde el servidor.
        Sin `local_path` retorna (contenido, respuesta); con `local_path` lo
        guarda en disco y retorna (bytes escritos, respuesta).
        """
        if local_path:
            return self._transfer(f"RETR {remote_filename}",
                                  lambda data_conn: data_conn.receive_file(local_path))
        return self._transfer(f"RETR {remote_filename}")

    # Helpers
    def get_history(self):
        """Return a copy of the history list."""
        return list(self.history)

    def clear_history(self):
        self.history.clear()
