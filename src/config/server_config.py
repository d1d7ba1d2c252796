"""Server configuration"""
import os
from typing import Optional


class ServerConfig:
    """Service settings read from environment variables"""

    DEFAULT_PORT = 8000

    # Hosted Graphite carbon endpoint (plaintext protocol over UDP)
    DEFAULT_GRAPHITE_HOST = 'carbon.hostedgraphite.com'
    DEFAULT_GRAPHITE_PORT = 2003

    # Seconds to wait for the InfluxDB endpoint
    INFLUXDB_TIMEOUT = 5

    # Worker threads for forwarding metrics
    FORWARDING_WORKERS = 2

    @staticmethod
    def get_port() -> int:
        """HTTP port, from PORT or the default"""
        port = os.environ.get('PORT')
        if not port:
            return ServerConfig.DEFAULT_PORT
        return int(port)

    @staticmethod
    def get_graphite_api_key() -> Optional[str]:
        """Hosted Graphite API key; forwarding to Graphite is off without one"""
        return os.environ.get('HOSTEDGRAPHITE_APIKEY') or None

    @staticmethod
    def get_graphite_address() -> tuple:
        host = os.environ.get('GRAPHITE_HOST', ServerConfig.DEFAULT_GRAPHITE_HOST)
        port = int(os.environ.get('GRAPHITE_PORT', ServerConfig.DEFAULT_GRAPHITE_PORT))
        return host, port

    @staticmethod
    def get_influxdb_url() -> Optional[str]:
        """InfluxDB series endpoint, e.g. http://host:8086/db/eagle/series?u=user&p=pass"""
        return os.environ.get('INFLUXDB_URL') or None

    @staticmethod
    def forwarding_enabled() -> bool:
        return os.environ.get('FORWARDING_ENABLED', 'true').lower() not in ('0', 'false', 'no')
