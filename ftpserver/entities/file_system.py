import logging
import os

from ftpserver.entities import replies
from ftpserver.entities.errors import FilesystemError

logger = logging.getLogger(__name__)

# =============================================================================
# PATH RESOLUTION
# =============================================================================

def resolve_path(current_directory, requested_path):
    """
    Resuelve `requested_path` contra el directorio actual.

    Returns:
        str: Ruta absoluta normalizada (un path absoluto reemplaza al actual)
    """
    return os.path.abspath(os.path.join(current_directory, requested_path or ""))

# =============================================================================
# DIRECTORIES
# =============================================================================

def change_directory(current_directory, new_path):
    """
    Calcula el nuevo directorio de trabajo.

    Raises:
        FilesystemError: si el destino no existe o no es un directorio
    """
    try:
        target = resolve_path(current_directory, new_path)
    except (ValueError, OSError) as e:
        raise FilesystemError(replies.MSG_FAILED_TO_CHANGE) from e

    if not os.path.isdir(target):
        raise FilesystemError(replies.MSG_FAILED_TO_CHANGE)
    return target


def list_directory(directory):
    """
    Lista las entradas de `directory` (no recursivo), en el orden del filesystem.

    Returns:
        List[str] con la ruta completa de cada elemento
    """
    try:
        with os.scandir(directory) as entries:
            return [entry.path for entry in entries]
    except OSError as e:
        logger.warning("Unable to list %s: %s", directory, e)
        raise FilesystemError(replies.MSG_ACTION_NOT_TAKEN) from e

# =============================================================================
# FILES
# =============================================================================

def get_file_info(current_directory, file_path):
    """
    Obtiene ruta absoluta, nombre y tamano de un archivo regular legible.

    Raises:
        FilesystemError: si no existe, no es un archivo o no se puede leer
    """
    real_path = resolve_path(current_directory, file_path)

    if not os.path.isfile(real_path) or not os.access(real_path, os.R_OK):
        raise FilesystemError(replies.MSG_FAILED_TO_OPEN)

    try:
        size = os.path.getsize(real_path)
    except OSError as e:
        raise FilesystemError(replies.MSG_FAILED_TO_OPEN) from e

    return {
        'path': real_path,
        'name': os.path.basename(real_path),
        'size': size,
    }


def open_file(real_path, binary=True):
    """Abre un archivo para lectura. En modo texto se decodifica como Latin-1
    para conservar cada byte y se reconocen \\r\\n, \\n y \\r como fin de linea."""
    try:
        if binary:
            return open(real_path, 'rb')
        return open(real_path, 'r', encoding='latin-1', newline=None)
    except OSError as e:
        raise FilesystemError(replies.MSG_FAILED_TO_OPEN) from e


def ensure_directory(path):
    """Valida un directorio raiz de configuracion y lo devuelve absoluto."""
    real_path = os.path.abspath(path)
    if not os.path.isdir(real_path):
        raise ValueError(f"Not a directory: {path}")
    return real_path
