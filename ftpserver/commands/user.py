from ftpserver.entities import replies
from ftpserver.entities.client_session import ANONYMOUS_USER
from ftpserver.entities.errors import AuthError


def handle_user(command, client_session):
    """Maneja comando USER - solo se admite el usuario anonimo."""
    if client_session.is_authenticated():
        raise AuthError(replies.MSG_CANT_CHANGE)

    username = command.get_arg(0)

    if username is None or username.lower() != ANONYMOUS_USER:
        raise AuthError(replies.MSG_ANONYMOUS_ONLY)

    # La proxima linea la despacha el bucle directamente al handler de PASS
    client_session.accept_username(username)
    client_session.send_response(replies.NEED_PASSWORD, replies.MSG_PASSWORD)
