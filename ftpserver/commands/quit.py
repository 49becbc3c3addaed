from ftpserver.entities import replies


def handle_quit(command, client_session):
    """Maneja comando QUIT: responde 221 y el dispatcher cierra la conexion."""
    client_session.close_data_connection()
    client_session.send_response(replies.GOODBYE, replies.MSG_GOODBYE)
    client_session.closing = True
