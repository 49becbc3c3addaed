"""
Cliente FTP minimo para hablar con ftpserver (y con cualquier servidor FTP
que respete el formato de respuesta de una linea).

ControlConnectionManager lee una respuesta por linea; ClientCommandHandler
negocia el canal de datos en modo pasivo (PASV) o activo (PORT) antes de cada
LIST/RETR y guarda el historial de comandos.
"""

from .commands import ClientCommandHandler
from .connection import ControlConnectionManager
from .data_connection import DataConnectionManager
from .parser import MessageStructure, Parser

__all__ = ["ClientCommandHandler", "ControlConnectionManager", "DataConnectionManager",
           "MessageStructure", "Parser"]
