import pytest

from ftpserver import main as main_module
from ftpserver.entities.server_config import ServerConfig

ENV_VARS = [
    "FTP_HOST", "FTP_PORT", "FTP_ROOT", "FTP_PASV_ADDRESS", "FTP_CONTROL_TIMEOUT",
    "FTP_PASV_TIMEOUT", "FTP_DATA_TIMEOUT", "FTP_DEFAULT_TYPE", "FTP_STRICT_PORT",
    "FTP_CONCURRENT", "FTP_BACKLOG", "FTP_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeServer:
    instances = []

    def __init__(self, config):
        self.config = config
        self.served = False
        self.shutdown_calls = []
        FakeServer.instances.append(self)

    def serve_forever(self):
        self.served = True

    def shutdown(self, wait=True, timeout=None):
        self.shutdown_calls.append(wait)


@pytest.fixture
def fake_server(monkeypatch):
    FakeServer.instances = []
    installed = {}
    monkeypatch.setattr(main_module, "FTPServer", FakeServer)
    monkeypatch.setattr(main_module.signal, "signal", lambda signum, handler: installed.setdefault(signum, handler))
    return installed


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    config = ServerConfig.from_env()
    assert (config.host, config.port) == ("0.0.0.0", 2121)
    assert config.root_directory == str(tmp_path)
    assert config.default_type == "I"
    assert config.pasv_address is None
    assert config.control_timeout is None
    assert config.pasv_accept_timeout is None
    assert not config.reply_on_bad_port
    assert not config.concurrent


def test_env_configuration(monkeypatch, tmp_path):
    monkeypatch.setenv("FTP_HOST", "127.0.0.1")
    monkeypatch.setenv("FTP_PORT", "2222")
    monkeypatch.setenv("FTP_ROOT", str(tmp_path))
    monkeypatch.setenv("FTP_PASV_ADDRESS", "203.0.113.7")
    monkeypatch.setenv("FTP_PASV_TIMEOUT", "2.5")
    monkeypatch.setenv("FTP_DEFAULT_TYPE", "a")
    monkeypatch.setenv("FTP_STRICT_PORT", "yes")
    monkeypatch.setenv("FTP_CONCURRENT", "1")

    config = ServerConfig.from_env()

    assert (config.host, config.port) == ("127.0.0.1", 2222)
    assert config.root_directory == str(tmp_path)
    assert config.pasv_address == "203.0.113.7"
    assert config.pasv_accept_timeout == 2.5
    assert config.default_type == "A"
    assert config.reply_on_bad_port
    assert config.concurrent


def test_overrides_win_over_env(monkeypatch, tmp_path):
    monkeypatch.setenv("FTP_PORT", "2222")
    config = ServerConfig.from_env(port=2323, root_directory=str(tmp_path), host=None)
    assert config.port == 2323
    assert config.host == "0.0.0.0"


@pytest.mark.parametrize("options", [
    {"port": 70000},
    {"default_type": "E"},
    {"pasv_accept_timeout": 0},
    {"control_timeout": -1},
])
def test_invalid_values(tmp_path, options):
    with pytest.raises(ValueError):
        ServerConfig(root_directory=str(tmp_path), **options)


def test_invalid_root(tmp_path):
    with pytest.raises(ValueError):
        ServerConfig(root_directory=str(tmp_path / "missing"))


def test_main_builds_server_from_arguments(fake_server, tmp_path):
    main_module.main([
        "--host", "127.0.0.1", "--port", "0", "--root", str(tmp_path),
        "--pasv-timeout", "3", "--default-type", "A", "--strict-port", "--concurrent",
    ])

    server = FakeServer.instances[-1]
    assert server.served
    assert server.config.host == "127.0.0.1"
    assert server.config.root_directory == str(tmp_path)
    assert server.config.pasv_accept_timeout == 3.0
    assert server.config.default_type == "A"
    assert server.config.reply_on_bad_port
    assert server.config.concurrent
    assert set(fake_server) == {main_module.signal.SIGINT, main_module.signal.SIGTERM}


def test_main_without_flags_keeps_env(fake_server, monkeypatch, tmp_path):
    monkeypatch.setenv("FTP_ROOT", str(tmp_path))
    monkeypatch.setenv("FTP_CONCURRENT", "true")

    main_module.main([])

    config = FakeServer.instances[-1].config
    assert config.root_directory == str(tmp_path)
    assert config.concurrent


def test_main_rejects_invalid_root(fake_server, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--root", str(tmp_path / "missing")])
    assert excinfo.value.code == 2
    assert FakeServer.instances == []


@pytest.mark.parametrize("signum", ["SIGINT", "SIGTERM"])
def test_signal_handler_stops_server_without_blocking(fake_server, tmp_path, signum):
    main_module.main(["--root", str(tmp_path)])

    handler = fake_server[getattr(main_module.signal, signum)]
    handler(getattr(main_module.signal, signum), None)

    assert FakeServer.instances[-1].shutdown_calls == [False]


@pytest.mark.parametrize("argv, env", [
    (["--log-level", "LOUD"], None),
    ([], "verbose"),
])
def test_main_rejects_invalid_log_level(fake_server, monkeypatch, tmp_path, argv, env):
    if env is not None:
        monkeypatch.setenv("FTP_LOG_LEVEL", env)
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(argv + ["--root", str(tmp_path)])
    assert excinfo.value.code == 2
    assert FakeServer.instances == []


def test_main_accepts_lowercase_log_level(fake_server, tmp_path):
    main_module.main(["--log-level", "debug", "--root", str(tmp_path)])
    assert FakeServer.instances[-1].served
