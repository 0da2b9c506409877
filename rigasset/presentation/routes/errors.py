"""
JSON error responses for the API

Domain errors map to their status codes; HTTP errors raised by Flask,
Flask-Login and Flask-Limiter answer with the same ``{"error": ...}`` body.
"""

from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from rigasset.business.core.errors import PersistenceError, RigAssetDomainError
from rigasset.logger import get_logger

logger = get_logger("rigasset.api.errors")


def register_error_handlers(app):

    @app.errorhandler(RigAssetDomainError)
    def handle_domain_error(error):
        if isinstance(error, PersistenceError):
            logger.error(f"{request.method} {request.path}: {error.message}", exc_info=error.__cause__ or error)
            return jsonify({'error': 'Internal server error'}), error.status_code
        logger.warning(f"{request.method} {request.path} -> {error.status_code}: {error.message}")
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': f"Route {request.method} {request.path} not found"}), 404

    @app.errorhandler(429)
    def handle_rate_limited(error):
        logger.warning(f"Rate limit hit for {request.remote_addr} on {request.path}")
        return jsonify({'error': 'Too many requests, please try again later.'}), 429

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description or error.name}), error.code
