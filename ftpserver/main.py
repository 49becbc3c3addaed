import argparse
import logging
import os
import signal
import sys

from ftpserver.entities.ftp_server import FTPServer
from ftpserver.entities.server_config import ServerConfig

logger = logging.getLogger("ftpserver")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="anonftp-server", description="Servidor FTP anonimo (PASV/PORT, ASCII/binario)")
    parser.add_argument("--host", help="Direccion de escucha del canal de control (FTP_HOST, por defecto 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Puerto del canal de control (FTP_PORT, por defecto 2121)")
    parser.add_argument("--root", dest="root_directory", help="Directorio de trabajo inicial (FTP_ROOT, por defecto el cwd)")
    parser.add_argument("--pasv-address", help="IP anunciada en las respuestas 227 (FTP_PASV_ADDRESS)")
    parser.add_argument("--control-timeout", type=float, help="Segundos de inactividad en el canal de control antes de cortar")
    parser.add_argument("--pasv-timeout", dest="pasv_accept_timeout", type=float, help="Segundos de espera a la conexion de datos tras PASV")
    parser.add_argument("--data-timeout", dest="data_connect_timeout", type=float, help="Timeout al conectar en modo activo (PORT)")
    parser.add_argument("--default-type", choices=["A", "I"], help="Tipo de transferencia inicial de cada sesion")
    parser.add_argument("--strict-port", dest="reply_on_bad_port", action="store_true", default=None, help="Responder 550 a un PORT mal formado")
    parser.add_argument("--concurrent", action="store_true", default=None, help="Atender cada cliente en su propio hilo")
    parser.add_argument("--backlog", type=int, help="Backlog del listener de control")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=os.getenv("FTP_LOG_LEVEL", "INFO"),
                        help="Nivel de logging (FTP_LOG_LEVEL, por defecto INFO)")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # argparse no valida `choices` contra el default que viene del entorno
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level: {args.log_level!r}")

    logging.basicConfig(level=args.log_level, format='%(asctime)s %(levelname)s %(message)s')

    overrides = vars(args).copy()
    overrides.pop("log_level")

    try:
        config = ServerConfig.from_env(**overrides)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    server = FTPServer(config)

    def _handle_sigint(signum, frame):
        logger.info("Shutting down listener")
        server.shutdown(wait=False)

    signal.signal(signal.SIGINT, _handle_sigint)
    signal.signal(signal.SIGTERM, _handle_sigint)

    logger.info("Starting server with %s", config)
    server.serve_forever()


if __name__ == "__main__":
    main()
