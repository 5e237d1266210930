"""
Feedback Forwarder - Cloud Functions Main Entry Point

One HTTP Cloud Function, feedback, multiplexed on method:

  OPTIONS  CORS preflight
  GET      issue a short-lived submission token: {"token": "<ms>.<sig>"}
  POST     verify the token, validate the fields, relay the feedback via Resend

Deployed as:
  gcloud functions deploy feedback --trigger-http --allow-unauthenticated \
      --set-secrets=HMAC_SECRET=feedback-hmac-secret:latest,RESEND_API_KEY=resend-api-key:latest

The endpoint is called from a desktop-app webview, so every response except
405 allows any origin.
"""

import logging
import os

import functions_framework
from flask import Request

from .auth import issue_token, verify_token
from .email_client import EmailDeliveryError, send_feedback_email
from .logging_utils import log_function, setup_cloud_logging
from .models import FeedbackSubmission, ValidationError
from .secrets import ConfigError, get_settings

# Setup Logging - structured JSON on GCP, plain text locally
setup_cloud_logging()
logger = logging.getLogger(__name__)

ALLOWED_METHODS = ('GET', 'POST', 'OPTIONS')

PREFLIGHT_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': ', '.join(ALLOWED_METHODS),
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Max-Age': '3600',
}

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Content-Type': 'application/json',
}

JSON_HEADERS = {'Content-Type': 'application/json'}

logger.info("Feedback service module loaded. Logging is operational.")


def preload_settings():
    """Resolve configuration at cold start so a broken deploy is logged before any request."""
    try:
        get_settings()
    except ConfigError as e:
        logger.error(f"Configuration error at startup: {e}", exc_info=True)


# K_SERVICE is only set on Cloud Functions; locally and in tests, load on first request
if os.environ.get("K_SERVICE"):
    preload_settings()


def _error(message: str, status: int, headers: dict = CORS_HEADERS):
    return {'error': message}, status, headers


@functions_framework.http
@log_function
def feedback(request: Request):
    """HTTP Cloud Function: token issuance (GET) and feedback relay (POST).

    POST body:
    {
        "token": "1718000000000.base64sig",
        "message": "Love the app!",
        "email": "user@example.com",
        "name": "Sam",            // optional
        "appVersion": "1.2.3"     // optional
    }

    Responses: 200 {"success": true}, 400/401/500 {"error": "..."}
    """
    if request.method == 'OPTIONS':
        return ('', 200, PREFLIGHT_HEADERS)

    if request.method not in ALLOWED_METHODS:
        return _error('Method not allowed', 405, JSON_HEADERS)

    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        return _error('Internal server error', 500)

    if request.method == 'GET':
        return {'token': issue_token(settings.hmac_secret)}, 200, CORS_HEADERS

    return _handle_submission(request, settings)


def _handle_submission(request: Request, settings):
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return _error('Invalid JSON', 400)

    status = verify_token(FeedbackSubmission.token_from(body), settings.hmac_secret)
    if not status.ok:
        logger.warning(f"Feedback rejected: token {status.value}")
        return _error(status.message, 401)

    try:
        submission = FeedbackSubmission.from_json(body)
    except ValidationError as e:
        return _error(str(e), 400)

    logger.info(
        f"Feedback received: email={submission.email} version={submission.app_version}"
    )

    try:
        send_feedback_email(submission, settings)
    except EmailDeliveryError as e:
        logger.error(f"Resend error: {e}", exc_info=True)
        return _error('Failed to send email', 500)
    except Exception as e:
        logger.error(f"Error in feedback: {e}", exc_info=True)
        return _error('Internal server error', 500)

    return {'success': True}, 200, CORS_HEADERS
