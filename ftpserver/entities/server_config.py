import os
from typing import Optional

from ftpserver.entities.file_system import ensure_directory

TYPE_ASCII = "A"
TYPE_BINARY = "I"


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return _positive_timeout(name, float(value))


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _positive_timeout(name: str, value: Optional[float]) -> Optional[float]:
    if value is not None and value <= 0:
        raise ValueError(f"{name} must be a positive number of seconds")
    return value


class ServerConfig:
    """Parametros del servidor. Los timeouts en None significan 'sin limite'."""

    def __init__(self, host: str = "0.0.0.0", port: int = 2121, root_directory: str = None,
                 pasv_address: str = None, control_timeout: float = None,
                 pasv_accept_timeout: float = None, data_connect_timeout: float = None,
                 default_type: str = TYPE_BINARY, reply_on_bad_port: bool = False,
                 concurrent: bool = False, backlog: int = 5):
        self.host = host
        self.port = int(port)
        self.root_directory = ensure_directory(root_directory or os.getcwd())
        self.pasv_address = pasv_address or None
        self.control_timeout = _positive_timeout("control_timeout", control_timeout)
        self.pasv_accept_timeout = _positive_timeout("pasv_accept_timeout", pasv_accept_timeout)
        self.data_connect_timeout = _positive_timeout("data_connect_timeout", data_connect_timeout)
        self.default_type = default_type.upper()
        self.reply_on_bad_port = reply_on_bad_port
        self.concurrent = concurrent
        self.backlog = int(backlog)

        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {port}")
        if self.default_type not in (TYPE_ASCII, TYPE_BINARY):
            raise ValueError(f"default_type must be 'A' or 'I', got {default_type!r}")

    @classmethod
    def from_env(cls, **overrides) -> "ServerConfig":
        """Construye la configuracion desde variables FTP_*; `overrides` gana."""
        values = {
            "host": os.getenv("FTP_HOST", "0.0.0.0"),
            "port": int(os.getenv("FTP_PORT", "2121")),
            "root_directory": os.getenv("FTP_ROOT"),
            "pasv_address": os.getenv("FTP_PASV_ADDRESS"),
            "control_timeout": _env_float("FTP_CONTROL_TIMEOUT"),
            "pasv_accept_timeout": _env_float("FTP_PASV_TIMEOUT"),
            "data_connect_timeout": _env_float("FTP_DATA_TIMEOUT"),
            "default_type": os.getenv("FTP_DEFAULT_TYPE", TYPE_BINARY),
            "reply_on_bad_port": _env_bool("FTP_STRICT_PORT"),
            "concurrent": _env_bool("FTP_CONCURRENT"),
            "backlog": int(os.getenv("FTP_BACKLOG", "5")),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def __repr__(self):
        return (f"ServerConfig(host={self.host!r}, port={self.port}, root={self.root_directory!r}, "
                f"default_type={self.default_type!r}, concurrent={self.concurrent})")
