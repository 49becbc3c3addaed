from ftpserver.entities import replies


class FTPError(Exception):
    """Error de un comando que se convierte en una respuesta al cliente.

    `message` es el texto que ve el cliente; `detail` (opcional) solo va al log.
    """

    code = replies.ACTION_FAILED
    default_message = replies.MSG_ACTION_NOT_TAKEN

    def __init__(self, message: str = None, code: int = None, detail: str = None):
        self.message = message or self.default_message
        self.detail = detail
        if code is not None:
            self.code = code
        super().__init__(detail or self.message)


class ProtocolError(FTPError):
    """Argumento mal formado (PORT sin sexteto valido)."""


class AuthError(FTPError):
    code = replies.NOT_LOGGED_IN
    default_message = replies.MSG_MUST_LOGIN


class FilesystemError(FTPError):
    """Ruta inexistente, ilegible o que no es del tipo esperado."""


class TransferError(FTPError):
    """Fallo de E/S a mitad de transferencia (origen o canal de datos)."""


class ControlConnectionError(Exception):
    """La conexion de control se cerro o fallo; termina la sesion."""
