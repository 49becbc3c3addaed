import io
import logging
from typing import BinaryIO, Iterable, TextIO

from ftpserver.entities.data_connection import DataConnection
from ftpserver.entities.errors import TransferError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 0x40000  # 256 KiB
CRLF = b"\r\n"


def send_lines(data_conn: DataConnection, source: TextIO, encoding: str = "latin-1") -> int:
    """Envia `source` linea a linea, terminando cada una en CRLF.

    `source` debe abrirse con newline=None para que \\r\\n, \\n y \\r se
    reconozcan como fin de linea. Cada linea es un envio independiente.
    Retorna el numero de lineas enviadas.
    """
    count = 0
    for line in _read_lines(source):
        data_conn.send(line.encode(encoding, errors="replace") + CRLF)
        count += 1
    logger.info("Text transfer finished: %d lines, %d bytes", count, data_conn.bytes_sent)
    return count


def send_listing(data_conn: DataConnection, entries: Iterable[str]) -> int:
    """Envia un listado de directorio como texto (siempre ASCII/CRLF)."""
    listing = "\n".join(entries)
    return send_lines(data_conn, io.StringIO(listing, newline=None), encoding="utf-8")


def send_binary(data_conn: DataConnection, source: BinaryIO, chunk_size: int = CHUNK_SIZE) -> int:
    """Envia `source` en bloques de `chunk_size` bytes hasta que una lectura devuelva 0."""
    total = 0
    while True:
        try:
            chunk = source.read(chunk_size)
        except OSError as e:
            raise TransferError(detail=f"Read failed after {total} bytes: {e}") from e

        if not chunk:
            break

        data_conn.send(chunk)
        total += len(chunk)

    logger.info("Binary transfer finished: %d bytes", total)
    return total


def _read_lines(source: TextIO):
    try:
        for line in source:
            yield line.rstrip("\r\n")
    except (OSError, UnicodeError) as e:
        raise TransferError(detail=f"Read failed: {e}") from e
