from ftpserver.entities import replies
from ftpserver.entities.errors import FTPError


def handle_type(command, client_session):
    """Maneja comando TYPE - 'A' selecciona ASCII, cualquier otro valor binario."""
    type_code = command.get_arg(0)
    if type_code is None:
        raise FTPError(replies.MSG_ACTION_NOT_TAKEN)

    client_session.set_transfer_type(type_code)
    mode = client_session.get_transfer_type_name()
    client_session.send_response(replies.OK, replies.MSG_MODE_SWITCH.format(mode=mode))
