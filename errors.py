import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error carrying the HTTP status returned to the client."""

    status_code = 500

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        return {'error': self.message, **self.payload}


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class UpstreamError(ApiError):
    """A collaborator (mail transport, inference API) failed."""

    status_code = 500


# largest value a signed 64-bit integer column can hold
MAX_ID = 2 ** 63 - 1


def parse_id(raw, kind='record'):
    """Turn a path or body identifier into an int, or reject it before any lookup."""
    text = str(raw).strip() if raw is not None else ''
    if not (text.isascii() and text.isdecimal()) or not 0 < int(text) <= MAX_ID:
        raise ValidationError(f'Invalid {kind} ID format')
    return int(text)


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def require_scalars(data, fields):
    """Reject lists and objects for keys that map onto plain text columns."""
    for field in fields:
        value = data.get(field)
        if value is not None and not isinstance(value, (str, int, float)):
            raise ValidationError(f'{field} must be a string')


def require_list(data, field):
    value = data.get(field)
    if value is not None and not isinstance(value, list):
        raise ValidationError(f'{field} must be a list')


def register_error_handlers(app, db):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            logger.error('%s %s failed: %s', request.method, request.path, err.message)
        else:
            logger.warning('%s %s -> %d: %s', request.method, request.path, err.status_code, err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({'error': err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        db.session.rollback()
        logger.exception('Unhandled error on %s %s', request.method, request.path)
        return jsonify({'error': 'Internal Server Error'}), 500
