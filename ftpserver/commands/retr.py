import logging

from ftpserver.entities import replies
from ftpserver.entities.errors import FTPError, TransferError
from ftpserver.entities.file_system import get_file_info, open_file
from ftpserver.entities.transfer import send_binary, send_lines

logger = logging.getLogger(__name__)


def handle_retr(command, client_session):
    """Maneja comando RETR - descarga de archivo por el canal de datos.

    El archivo se valida antes de empezar la transferencia. El canal de datos
    se cierra siempre al terminar, con exito o no.
    """
    data_conn = client_session.take_data_connection()

    try:
        if not command.arg_text:
            raise FTPError(replies.MSG_FAILED_TO_OPEN)

        file_info = get_file_info(client_session.current_directory, command.arg_text)

        if data_conn is None or not data_conn.is_connected():
            raise TransferError(replies.MSG_ACTION_NOT_TAKEN)

        ascii_mode = client_session.is_ascii()
        with open_file(file_info['path'], binary=not ascii_mode) as f:
            message = replies.MSG_FILE_INCOMING.format(mode=client_session.get_transfer_type_name(),
                                                       name=file_info['name'], size=file_info['size'])
            client_session.send_response(replies.OPENING_DATA, message)

            if ascii_mode:
                send_lines(data_conn, f)
            else:
                send_binary(data_conn, f)

    finally:
        if data_conn is not None:
            data_conn.close()

    logger.info("RETR successful: %s", file_info['path'])
    client_session.send_response(replies.TRANSFER_COMPLETE, replies.MSG_FILE_SEND_OK)
