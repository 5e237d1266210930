"""
Shared test configuration.

Unit tests never touch Secret Manager or Resend: `settings` provides a fixed
configuration and `call_feedback` invokes the Cloud Function with a Flask
request built in-process.

Integration tests target a deployed function. They read its URL from
FEEDBACK_URL and are skipped when it is not set.
"""

import os

import flask
import pytest

from service.secrets import Settings, _reset_caches

TEST_SETTINGS = Settings(
    hmac_secret="test_secret_key_for_hmac_signing",
    resend_api_key="re_test_key",
    to_email="test@example.com",
    from_email="from@example.com",
)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: hits the deployed function (needs FEEDBACK_URL)"
    )


def pytest_collection_modifyitems(config, items):
    if os.environ.get("FEEDBACK_URL"):
        return
    skip = pytest.mark.skip(reason="FEEDBACK_URL not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    _reset_caches()
    yield
    _reset_caches()


@pytest.fixture
def settings():
    with pytest.MonkeyPatch.context() as mp:
        mp.setattr("service.main.get_settings", lambda: TEST_SETTINGS)
        yield TEST_SETTINGS


@pytest.fixture
def call_feedback(settings):
    """Call service.main.feedback with an in-process Flask request.

    Returns the (body, status, headers) tuple the function produced.
    """
    from service.main import feedback

    app = flask.Flask(__name__)

    def _call(method, json=None, data=None, content_type=None):
        with app.test_request_context(
            "/", method=method, json=json, data=data, content_type=content_type
        ):
            return feedback(flask.request)

    return _call
