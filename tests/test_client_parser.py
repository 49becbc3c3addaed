import pytest

from ftpclient import Parser

parser = Parser()


@pytest.mark.parametrize("raw, expected_code, expected_type", [
    ("227 Entering Passive Mode (172,25,0,12,156,189)", "227", "success"),
    ("200 OK", "200", "success"),
    ("500 Syntax error", "500", "error"),
    ("150 Opening data connection", "150", "preliminary"),
    ("331 Password required", "331", "missing_info"),
    ("425 Can't open data connection", "425", "error"),
    ("  230 Login successful.\r\n", "230", "success"),
])
def test_parse_data(raw, expected_code, expected_type):
    result = parser.parse_data(raw)
    assert result.code == expected_code
    assert result.type == expected_type


def test_parse_data_splits_message():
    result = parser.parse_data("550 Failed to open file.")
    assert result.message == "Failed to open file."


@pytest.mark.parametrize("raw", ["", "hello", "22 short", "> 227 Entering Passive Mode"])
def test_parse_data_rejects_bad_code(raw):
    result = parser.parse_data(raw)
    assert result.code == "000"
    assert result.type == "unknown"


def test_parse_pasv_response():
    ip, port = parser.parse_pasv_response("Entering Passive Mode (172,25,0,12,156,189).")
    assert (ip, port) == ("172.25.0.12", 156 * 256 + 189)


@pytest.mark.parametrize("message", ["Entering Passive Mode", "Entering Passive Mode (1,2,3)."])
def test_parse_pasv_response_invalid(message):
    with pytest.raises(ValueError):
        parser.parse_pasv_response(message)


def test_build_port_argument():
    assert parser.build_port_argument("127.0.0.1", 4488) == "127,0,0,1,17,136"
