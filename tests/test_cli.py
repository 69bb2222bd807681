import pytest

from password_please.__main__ import build_settings, parse_address


@pytest.mark.parametrize(
    "address, expected",
    [
        (":8080", ("0.0.0.0", 8080)),
        ("127.0.0.1:9000", ("127.0.0.1", 9000)),
        ("[::1]:8000", ("::1", 8000)),
        ("localhost:0", ("localhost", 0)),
    ],
)
def test_parse_address(address, expected):
    assert parse_address(address) == expected


@pytest.mark.parametrize("address", ["8080", "localhost:", "host:port"])
def test_parse_address_rejects_invalid(address):
    with pytest.raises(ValueError):
        parse_address(address)


def test_build_settings_applies_flags(tmp_path):
    path = str(tmp_path / "counter.txt")
    cfg = build_settings(["--http", "127.0.0.1:9001", "--counter", path])
    assert cfg.http_host == "127.0.0.1"
    assert cfg.port == 9001
    assert cfg.counter_file == path
    assert cfg.persistence_enabled
    assert cfg.listen_address == "127.0.0.1:9001"


def test_build_settings_empty_counter_disables_persistence():
    cfg = build_settings(["--counter", ""])
    assert cfg.counter_file is None
    assert not cfg.persistence_enabled


def test_build_settings_rejects_bad_address():
    with pytest.raises(SystemExit):
        build_settings(["--http", "nowhere"])
