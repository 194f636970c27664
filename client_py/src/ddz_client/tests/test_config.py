"""
Configuration tests.
"""

import pytest

from ddz_client.config import ClientConfig, config_from_env, create_config, default_config
from ddz_client.errors import INVALID_CONFIG, ClientError


def test_defaults():
    config = ClientConfig()
    assert config.server_url == "ws://127.0.0.1:33030/ws"
    assert config.reconnect_base_ms == 1500
    assert config.reconnect_ceiling_ms == 12000
    assert config.room_list_poll_ms == 500
    assert config.max_recommendations == 5


def test_reconnect_delay_doubles_up_to_ceiling():
    assert [default_config.reconnect_delay_ms(n) for n in range(6)] == [
        1500, 3000, 6000, 12000, 12000, 12000,
    ]


def test_overrides():
    config = create_config(server_url="wss://example.org/ws", log_level="debug")
    assert config.server_url == "wss://example.org/ws"
    assert config.log_level == "DEBUG"
    assert default_config.server_url == "ws://127.0.0.1:33030/ws"


@pytest.mark.parametrize("overrides", [
    {"server_url": "http://example.org"},
    {"reconnect_base_ms": 5000, "reconnect_ceiling_ms": 1000},
    {"room_list_poll_ms": 0},
    {"max_recommendations": 0},
])
def test_invalid_config(overrides):
    with pytest.raises(ClientError) as excinfo:
        create_config(**overrides)
    assert excinfo.value.code == INVALID_CONFIG


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("DDZ_SERVER_URL", "ws://10.0.0.5:9000/ws")
    monkeypatch.setenv("DDZ_POLL_MS", "750")
    monkeypatch.setenv("LOG_LEVEL", "warning")
    config = config_from_env()
    assert config.server_url == "ws://10.0.0.5:9000/ws"
    assert config.room_list_poll_ms == 750
    assert config.log_level == "WARNING"
