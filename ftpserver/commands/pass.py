from ftpserver.entities import replies
from ftpserver.entities.errors import AuthError


def handle_pass(command, client_session):
    """Maneja comando PASS - cualquier contrasena vale tras un USER aceptado."""
    if client_session.is_authenticated():
        raise AuthError(replies.MSG_CANT_CHANGE)

    client_session.authenticate()
    client_session.send_response(replies.LOGIN_SUCCESS, replies.MSG_LOGIN_SUCCESS)
