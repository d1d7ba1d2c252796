"""Tests for metric forwarding to external sinks"""
import pytest
from unittest.mock import patch, MagicMock

import requests

from services.forwarding_service import ForwardingService, GraphiteSink, InfluxDBSink


@pytest.fixture
def clean_env(monkeypatch):
    """Remove forwarding variables from the environment"""
    for name in ('HOSTEDGRAPHITE_APIKEY', 'INFLUXDB_URL', 'FORWARDING_ENABLED',
                 'GRAPHITE_HOST', 'GRAPHITE_PORT'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_graphite_line_format():
    """Test the carbon plaintext line"""
    sink = GraphiteSink('api-key', 'localhost', 2003)
    assert sink.format_line('demand', 5944) == 'api-key.demand 5944\n'


def test_graphite_send():
    """Test the line is sent as one UDP datagram"""
    sink = GraphiteSink('api-key', 'carbon.example.com', 2003)
    with patch('services.forwarding_service.socket.socket') as mock_socket:
        sock = mock_socket.return_value.__enter__.return_value
        success, _ = sink.send('price', 797)

    assert success
    sock.sendto.assert_called_once_with(b'api-key.price 797\n', ('carbon.example.com', 2003))


def test_graphite_send_failure():
    """Test socket errors are reported, not raised"""
    sink = GraphiteSink('api-key', 'carbon.example.com', 2003)
    with patch('services.forwarding_service.socket.socket') as mock_socket:
        mock_socket.return_value.__enter__.return_value.sendto.side_effect = OSError('unreachable')
        success, message = sink.send('price', 797)

    assert not success
    assert 'unreachable' in message


def test_influxdb_send():
    """Test the series payload posted to InfluxDB"""
    sink = InfluxDBSink('http://influx.example.com:8086/db/eagle/series', timeout=2)
    with patch('services.forwarding_service.requests.post') as mock_post:
        mock_post.return_value.status_code = 200
        success, _ = sink.send('demand', 5944)

    assert success
    mock_post.assert_called_once_with(
        'http://influx.example.com:8086/db/eagle/series',
        json=[{'name': 'demand', 'columns': ['value'], 'points': [[5944]]}],
        timeout=2,
    )


def test_influxdb_send_failure():
    """Test request errors and error statuses are reported, not raised"""
    sink = InfluxDBSink('http://influx.example.com:8086/db/eagle/series')
    with patch('services.forwarding_service.requests.post') as mock_post:
        mock_post.side_effect = requests.ConnectionError('refused')
        success, message = sink.send('demand', 1)
    assert not success
    assert 'refused' in message

    with patch('services.forwarding_service.requests.post') as mock_post:
        mock_post.return_value.status_code = 401
        mock_post.return_value.text = 'unauthorized'
        success, message = sink.send('demand', 1)
    assert not success
    assert '401' in message


def test_forward_fans_out_and_survives_failures():
    """Test every sink is tried even when one raises"""
    broken = MagicMock()
    broken.name = 'broken'
    broken.send.side_effect = ValueError('boom')
    failing = MagicMock()
    failing.name = 'failing'
    failing.send.return_value = (False, 'nope')
    working = MagicMock()
    working.name = 'working'
    working.send.return_value = (True, 'Sent')

    service = ForwardingService([broken, failing, working])
    try:
        delivered = service.forward('demand', 5944).result(timeout=5)
    finally:
        service.shutdown()

    assert delivered == 1
    for sink in (broken, failing, working):
        sink.send.assert_called_once_with('demand', 5944)


def test_from_config_without_sinks(clean_env):
    """Test no service is built when nothing is configured"""
    assert ForwardingService.from_config() is None


def test_from_config_disabled(clean_env):
    """Test FORWARDING_ENABLED=false disables forwarding"""
    clean_env.setenv('HOSTEDGRAPHITE_APIKEY', 'key')
    clean_env.setenv('FORWARDING_ENABLED', 'false')
    assert ForwardingService.from_config() is None


def test_from_config_builds_sinks(clean_env):
    """Test sinks are built from the environment"""
    clean_env.setenv('HOSTEDGRAPHITE_APIKEY', 'key')
    clean_env.setenv('GRAPHITE_PORT', '2004')
    clean_env.setenv('INFLUXDB_URL', 'http://influx.example.com:8086/db/eagle/series')

    service = ForwardingService.from_config()
    try:
        assert [sink.name for sink in service.sinks] == ['graphite', 'influxdb']
        assert service.sinks[0].address == ('carbon.hostedgraphite.com', 2004)
    finally:
        service.shutdown()
