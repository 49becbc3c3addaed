from ftpserver.entities import replies
from ftpserver.entities.file_system import change_directory


def handle_cwd(command, client_session):
    """Maneja comando CWD - Change Working Directory.

    Sin argumento se resuelve al directorio actual. Si el destino no es un
    directorio existente la sesion no cambia (550).
    """
    new_directory = change_directory(client_session.current_directory, command.arg_text)

    client_session.current_directory = new_directory
    client_session.send_response(replies.DIR_CHANGED, replies.MSG_DIR_CHANGE_SUCCESS)
