from ftpserver.entities import replies
from ftpserver.entities.errors import TransferError
from ftpserver.entities.file_system import list_directory
from ftpserver.entities.transfer import send_listing


def handle_list(command, client_session):
    """Maneja comando LIST - listado del directorio de trabajo, siempre como texto."""
    data_conn = client_session.take_data_connection()

    try:
        if data_conn is None or not data_conn.is_connected():
            raise TransferError(replies.MSG_ACTION_NOT_TAKEN)

        entries = list_directory(client_session.current_directory)

        client_session.send_response(replies.OPENING_DATA, replies.MSG_DIR_INCOMING)
        send_listing(data_conn, entries)

    finally:
        if data_conn is not None:
            data_conn.close()

    client_session.send_response(replies.TRANSFER_COMPLETE, replies.MSG_DIR_SEND_OK)
