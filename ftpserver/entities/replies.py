"""Codigos de respuesta y mensajes canonicos del servidor."""

OPENING_DATA = 150
MSG_DIR_INCOMING = "Here comes the directory listing."
MSG_FILE_INCOMING = "Opening {mode} mode data connection for {name} ({size} bytes)."

OK = 200
MSG_NOT_SUPPORTED = "Command not supported."
MSG_MODE_SWITCH = "Switching to {mode} mode."
MSG_PORT_SUCCESS = "Port command successful."

SERVICE_READY = 220
MSG_WELCOME = "Welcome to my FTP server. Please don't break anything."

GOODBYE = 221
MSG_GOODBYE = "Goodbye."

TRANSFER_COMPLETE = 226
MSG_DIR_SEND_OK = "Directory send OK."
MSG_FILE_SEND_OK = "Transfer complete."

PASSIVE_MODE = 227
MSG_PASSIVE_MODE = "Entering Passive Mode ({address})."

LOGIN_SUCCESS = 230
MSG_LOGIN_SUCCESS = "Login successful."

DIR_CHANGED = 250
MSG_DIR_CHANGE_SUCCESS = "Directory successfully changed."

NEED_PASSWORD = 331
MSG_PASSWORD = "Please supply the password."

NOT_LOGGED_IN = 530
MSG_ANONYMOUS_ONLY = "This FTP server is anonymous only."
MSG_MUST_LOGIN = "Please login with USER and PASS."
MSG_CANT_CHANGE = "Can't change from guest user."

ACTION_FAILED = 550
MSG_ACTION_NOT_TAKEN = "The requested action could not be completed."
MSG_FAILED_TO_OPEN = "Failed to open file."
MSG_FAILED_TO_CHANGE = "Failed to change directory."


def format_reply(code: int, message: str) -> str:
    return f"{code} {message}\r\n"
