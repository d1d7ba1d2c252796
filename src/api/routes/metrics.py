"""Metrics endpoint: telegram ingestion and reading reports"""
import logging
from flask import Blueprint, current_app, request, jsonify
from werkzeug.exceptions import MethodNotAllowed
from utils.errors import TelegramError, UnsupportedMethodError

# Configure logging
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

metrics_bp = Blueprint('metrics', __name__)

# Methods routed to the view; any other method is answered by handle_method_not_allowed
ROUTED_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def _telegram_service():
    return current_app.extensions['telegram_service']


def _plain_text(message: str, status: int):
    return message, status, {'Content-Type': 'text/plain; charset=utf-8'}


@metrics_bp.errorhandler(TelegramError)
def handle_telegram_error(error: TelegramError):
    """Log request context and answer with the error as plain text"""
    body = request.get_data(cache=True)
    logger.error(
        f"{error.status_code} from {request.method} {request.path} "
        f"({request.remote_addr}): {error.message} - body: {body[:2048]!r}"
    )
    return _plain_text(error.message, error.status_code)


@metrics_bp.app_errorhandler(MethodNotAllowed)
def handle_method_not_allowed(error: MethodNotAllowed):
    """Answer unrouted methods on /metrics (TRACE, custom verbs) with a 400"""
    if request.path != '/metrics':
        return error.get_response()
    logger.warning(f"Received bad request: {request.method} {request.url}")
    return handle_telegram_error(UnsupportedMethodError(f"Unsupported method: {request.method}"))


@metrics_bp.route('/metrics', methods=ROUTED_METHODS, provide_automatic_options=False)
def metrics():
    """Dispatch on HTTP method: POST ingests a telegram, GET reports readings"""
    if request.method == 'POST':
        return receive_metrics()
    if request.method == 'GET':
        return report_metrics()
    logger.warning(f"Received bad request: {request.method} {request.url}")
    raise UnsupportedMethodError(f"Unsupported method: {request.method}")


def receive_metrics():
    """
    Accept one XML telegram from the gateway

    Example body:
    <rainforest macId="0xf0ad4e00ce69" timestamp="1355292588s">
      <PriceCluster>
        <Price>0x0000031d</Price>
        <Currency>0x007c</Currency>
        <TrailingDigits>0x04</TrailingDigits>
      </PriceCluster>
    </rainforest>

    Returns 200 for every well-formed telegram, including kinds that are
    not decoded, and 500 with a plain-text error otherwise.
    """
    body = request.get_data(cache=True)
    logger.debug(f"Received telegram ({len(body)} bytes) from {request.remote_addr}")

    try:
        result = _telegram_service().receive(body)
    except TelegramError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error handling telegram: {str(e)} - body: {body[:2048]!r}")
        return _plain_text(f'Internal server error: {str(e)}', 500)

    return jsonify(result.to_dict()), 200


def report_metrics():
    """Return every reading in append order as a JSON array"""
    readings = _telegram_service().store.snapshot()
    return jsonify([reading.to_dict() for reading in readings]), 200
