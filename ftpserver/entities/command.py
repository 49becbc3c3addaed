class Command:
    """Una linea recibida por el canal de control, ya parseada.

    `name` es la operacion en mayusculas (la comparacion es case-insensitive),
    `operation` conserva la forma original, `args` son los tokens restantes y
    `text` es la linea original terminada siempre en CRLF.
    """

    __slots__ = ("operation", "name", "args", "arg_text", "text")

    def __init__(self, raw_command: str):
        if raw_command.endswith("\r\n"):
            text = raw_command
        else:
            text = raw_command.rstrip("\r\n") + "\r\n"

        parts = raw_command.split(None, 1)
        operation = parts[0] if parts else ""
        remainder = parts[1].strip() if len(parts) > 1 else ""

        object.__setattr__(self, "operation", operation)
        object.__setattr__(self, "name", operation.upper())
        object.__setattr__(self, "args", tuple(remainder.split()))
        object.__setattr__(self, "arg_text", remainder)
        object.__setattr__(self, "text", text)

    def __setattr__(self, key, value):
        raise AttributeError("Command is immutable")

    def __repr__(self):
        return f"Command(name='{self.name}', args={list(self.args)})"

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return self.text == other.text

    def __hash__(self):
        return hash(self.text)

    def is_empty(self) -> bool:
        """True si la linea estaba vacia o solo tenia espacios."""
        return not self.operation

    def get_name(self):
        return self.name

    def get_args(self):
        return list(self.args)

    def arg_count(self):
        return len(self.args)

    def require_args(self, count):
        """Verifica si el comando tiene exactamente 'count' argumentos"""
        return self.arg_count() == count

    def get_arg(self, index, default=None):
        """Devuelve un argumento especifico por indice"""
        try:
            return self.args[index]
        except IndexError:
            return default
