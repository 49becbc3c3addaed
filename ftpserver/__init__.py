"""Servidor FTP anonimo: canal de control con maquina de estados por sesion
y canal de datos en modo pasivo (PASV) o activo (PORT)."""

__all__ = ["FTPServer", "ServerConfig"]

def __getattr__(name: str):
    if name == "FTPServer":
        from .entities.ftp_server import FTPServer
        return FTPServer
    if name == "ServerConfig":
        from .entities.server_config import ServerConfig
        return ServerConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
    return __all__
