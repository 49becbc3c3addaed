import logging

from ftpserver.entities import replies
from ftpserver.entities.data_connection import PassiveDataConnection, get_pasv_ip

logger = logging.getLogger(__name__)


def handle_pasv(command, client_session):
    """Maneja comando PASV - modo pasivo para transferencia de datos.

    Responde 227 con la direccion codificada y luego bloquea hasta que el
    cliente se conecta (o vence `pasv_accept_timeout`).
    """
    config = client_session.config

    # Limpiar canal de datos previo si existe
    client_session.close_data_connection()

    pasv_ip = get_pasv_ip(client_session.control_socket, config.pasv_address)
    data_connection = PassiveDataConnection(bind_host=config.host, advertised_ip=pasv_ip)
    client_session.set_data_connection(data_connection)

    message = replies.MSG_PASSIVE_MODE.format(address=data_connection.encode_address())
    client_session.send_response(replies.PASSIVE_MODE, message)

    if not data_connection.accept(timeout=config.pasv_accept_timeout):
        logger.warning("No data connection from %s; PASV abandoned", client_session.client_address)
        client_session.close_data_connection()
