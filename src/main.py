"""Entry point for the EAGLE gateway metrics API"""
from flask import Flask
from api.routes.metrics import metrics_bp
from config.server_config import ServerConfig
from services.forwarding_service import ForwardingService
from services.metrics_store import MetricsStore
from services.telegram_service import TelegramService


def create_app(store=None, forwarder=None, forwarding=True):
    """
    Build the Flask app and hand it the metrics store it owns

    Args:
        store: Metrics log to serve; a fresh one if omitted
        forwarder: Forwarding service; built from the environment if omitted
        forwarding: Set False to skip building a forwarder from the environment
    """
    app = Flask(__name__)

    if store is None:
        store = MetricsStore()
    if forwarder is None and forwarding:
        forwarder = ForwardingService.from_config()
    app.extensions['telegram_service'] = TelegramService(store, forwarder)

    # Register blueprints
    app.register_blueprint(metrics_bp)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return {'status': 'healthy'}, 200

    return app


app = create_app()

if __name__ == '__main__':
    # Get port from environment variable (Heroku sets this)
    app.run(host='0.0.0.0', port=ServerConfig.get_port(), debug=False)
