"""Tests for server configuration"""
from config.server_config import ServerConfig


def test_port_defaults_to_8000(monkeypatch):
    """Test default port when PORT is unset"""
    monkeypatch.delenv('PORT', raising=False)
    assert ServerConfig.get_port() == 8000


def test_port_from_environment(monkeypatch):
    """Test PORT overrides the default"""
    monkeypatch.setenv('PORT', '5000')
    assert ServerConfig.get_port() == 5000
