import logging

from ftpserver.entities import replies
from ftpserver.entities.data_connection import ActiveDataConnection, parse_port_argument
from ftpserver.entities.errors import FTPError

logger = logging.getLogger(__name__)


def handle_port(command, client_session):
    """Maneja comando PORT h1,h2,h3,h4,p1,p2 - modo activo.

    Un argumento sin sexteto valido lanza ProtocolError (sin respuesta salvo
    que `reply_on_bad_port` este activo).
    """
    if command.arg_count() < 1:
        raise FTPError(replies.MSG_ACTION_NOT_TAKEN)

    client_session.close_data_connection()

    ip, port = parse_port_argument(command.text)
    logger.info("PORT target for %s: %s:%d", client_session.client_address, ip, port)

    data_connection = ActiveDataConnection(ip, port)
    data_connection.connect(timeout=client_session.config.data_connect_timeout)
    client_session.set_data_connection(data_connection)

    client_session.send_response(replies.OK, replies.MSG_PORT_SUCCESS)
